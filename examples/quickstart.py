"""
wowunity Quick Start Example

Post-processes every exported model in a project's Assets/World folder.
"""

import logging
from pathlib import Path

from wowunity import FileSystemAssetStore, ImportBatch, PipelineSettings

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

# Settings from WOWUNITY_* environment variables (project root, pipeline...)
settings = PipelineSettings.from_env()
store = FileSystemAssetStore(settings.project_root)

batch = ImportBatch(settings)
for model in sorted(Path(settings.project_root, "Assets", "World").glob("*.obj")):
    batch.queue(model.relative_to(settings.project_root).as_posix())

for result in batch.process(store):
    if result.status == 'processed':
        print(f"✅ {result.path}: {result.prefab_path} + {len(result.clip_paths)} clips")
    elif result.status == 'failed':
        print(f"❌ {result.path}: {result.error}")
