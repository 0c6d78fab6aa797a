"""
wowunity Advanced Example

Runs the derivation steps one at a time on a single model, without writing
anything: resolve material records, configure materials, build clips.
"""

import sys

from wowunity import InMemoryAssetStore, FileSystemAssetStore, PipelineSettings
from wowunity.animation import derive_animation_clips
from wowunity.materials import configure_material
from wowunity.metadata import read_metadata_for

model_path = sys.argv[1] if len(sys.argv) > 1 else "Assets/World/waterfall.obj"
settings = PipelineSettings.from_env()
store = InMemoryAssetStore(backing=FileSystemAssetStore(settings.project_root))

metadata = read_metadata_for(model_path, settings.project_root)
if metadata is None:
    sys.exit(f"No metadata for {model_path}")

model = store.load_asset(model_path)
if model is not None:
    print("--- Materials ---")
    for renderer in model.renderers:
        for material, description in zip(renderer.materials, renderer.descriptions):
            configure_material(description, material, model_path, metadata, store, settings)
            print(material.model_dump_json(indent=2))

print("\n--- Clips ---")
for index, clip in derive_animation_clips(metadata.file_name or model_path, metadata):
    print(f"[{index}] {clip.name}: {[c.path for c in clip.curves]} ({clip.length:.2f}s)")
