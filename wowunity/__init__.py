"""
wowunity - Post-process exported World of Warcraft models for Unity

Reads the JSON sidecar written next to each exported M2/ADT model and derives
materials (shader, blend mode, textures, vertex color), texture animation
clips and a static prefab, through an injectable asset store.
"""

from wowunity.pipeline import ImportBatch, AssetResult, process_batch
from wowunity.config import PipelineSettings
from wowunity.assets import AssetStore, InMemoryAssetStore, FileSystemAssetStore

__version__ = "0.1.0"
__all__ = [
    "ImportBatch",
    "AssetResult",
    "process_batch",
    "PipelineSettings",
    "AssetStore",
    "InMemoryAssetStore",
    "FileSystemAssetStore",
]
