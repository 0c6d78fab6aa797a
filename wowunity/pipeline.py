"""
Import post-processing

Turns a batch of freshly imported models into prefabs, extracted materials
and texture animation clips. Assets are processed one after the other in
queue order; a failure is logged against its own asset and the batch moves
on.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Literal, Optional

from wowunity.animation import clip_path_for, derive_animation_clips
from wowunity.assets import AssetStore, ImportedModel, Prefab
from wowunity.config import PipelineSettings
from wowunity.exceptions import MetadataParseError
from wowunity.materials import configure_material
from wowunity.materials.material import MaterialAsset, MaterialDescription
from wowunity.metadata import read_metadata_for
from wowunity.schema import M2Metadata

logger = logging.getLogger(__name__)


@dataclass
class AssetResult:
    """
    Outcome for one queued model.

    Attributes:
        path: Model asset path
        status: 'processed', 'skipped' (no metadata) or 'failed'
        prefab_path: Prefab path, None if no prefab could be made
        clip_paths: Animation clips written for this model
        error: Error message when status is 'failed'
    """
    path: str
    status: Literal['processed', 'skipped', 'failed']
    prefab_path: Optional[str] = None
    clip_paths: List[str] = field(default_factory=list)
    error: Optional[str] = None


class ImportBatch:
    """
    Models queued during one import, owned by the caller.

    Example:
        >>> batch = ImportBatch()
        >>> batch.queue("Assets/World/tree.obj")
        >>> results = batch.process(store)
        >>> batch.pending
        []
    """

    def __init__(self, settings: Optional[PipelineSettings] = None):
        self.settings = settings or PipelineSettings()
        self.pending: List[str] = []

    def queue(self, path: str) -> None:
        self.pending.append(path)

    def process(self, store: AssetStore) -> List[AssetResult]:
        """Process every queued path, then empty the queue (always)."""
        try:
            return process_batch(list(self.pending), store, self.settings)
        finally:
            self.pending.clear()


def process_batch(
    paths: Iterable[str],
    store: AssetStore,
    settings: Optional[PipelineSettings] = None
) -> List[AssetResult]:
    """
    Post-process imported models in order.

    Args:
        paths: Model asset paths, relative to settings.project_root
        store: Asset store to read models from and write assets to
        settings: Pipeline settings (defaults if None)

    Returns:
        One AssetResult per path, in order
    """
    settings = settings or PipelineSettings()
    results = []
    for path in paths:
        try:
            results.append(process_asset(path, store, settings))
        except Exception as e:
            logger.exception(f"Failed to process {path}")
            results.append(AssetResult(path=path, status='failed', error=str(e)))
    return results


def process_asset(path: str, store: AssetStore, settings: PipelineSettings) -> AssetResult:
    try:
        metadata = read_metadata_for(path, settings.project_root, settings.metadata_extension)
    except MetadataParseError as e:
        logger.error(str(e))
        return AssetResult(path=path, status='failed', error=str(e))

    if metadata is None:
        return AssetResult(path=path, status='skipped')

    model_name = metadata.file_name or Path(path).stem
    logger.info(f"Processing metadata for: {model_name}")

    prefab_path = prefab_path_for(path, settings)
    prefab = find_or_create_prefab(path, store, settings, metadata)
    result = AssetResult(
        path=path,
        status='processed',
        prefab_path=prefab_path if prefab is not None else None
    )

    for index, clip in derive_animation_clips(model_name, metadata):
        clip_path = clip_path_for(path, index)
        store.create_asset(clip, clip_path)
        result.clip_paths.append(clip_path)

    return result


def prefab_path_for(model_path: str, settings: PipelineSettings) -> str:
    return Path(model_path).with_suffix(settings.prefab_extension).as_posix()


def find_or_create_prefab(
    model_path: str,
    store: AssetStore,
    settings: PipelineSettings,
    metadata: Optional[M2Metadata] = None
) -> Optional[Prefab]:
    existing = store.load_asset(prefab_path_for(model_path, settings))
    if existing is None:
        return generate_prefab(model_path, store, settings, metadata)
    return existing


def generate_prefab(
    model_path: str,
    store: AssetStore,
    settings: PipelineSettings,
    metadata: Optional[M2Metadata] = None
) -> Optional[Prefab]:
    """
    Build a static prefab for an imported model.

    Configures and extracts every renderer material, instantiates the model,
    marks the root and its direct children static and saves the prefab.

    Returns:
        The saved prefab, or None if the imported model is missing
    """
    model = store.load_asset(model_path)
    if model is None:
        logger.warning(f"Tried to create prefab, but could not find imported model: {model_path}")
        return None

    configure_renderer_materials(model, store, settings, metadata)

    instance = store.instantiate_prefab(model)
    instance.is_static = True
    for child in instance.children:
        child.is_static = True

    prefab = store.save_prefab(instance, prefab_path_for(model_path, settings))
    store.refresh()
    return prefab


def configure_renderer_materials(
    model: ImportedModel,
    store: AssetStore,
    settings: PipelineSettings,
    metadata: Optional[M2Metadata] = None
) -> None:
    for renderer in model.renderers:
        descriptions = {d.name: d for d in renderer.descriptions}
        for material in renderer.materials:
            description = descriptions.get(material.name) or MaterialDescription(name=material.name)
            configure_material(description, material, model.path, metadata, store, settings)
            # Repeated materials resolve to the already extracted asset
            extract_material_from_asset(model.path, material, store, settings)
    store.refresh()


def extract_material_from_asset(
    model_path: str,
    material: MaterialAsset,
    store: AssetStore,
    settings: PipelineSettings
) -> MaterialAsset:
    """Copy an imported material to the materials folder and remap the model to it."""
    material_path = f"{settings.materials_dir}/{material.name}.mat"

    extracted = store.load_asset(material_path)
    if extracted is None:
        extracted = material.model_copy(deep=True)
        store.create_asset(extracted, material_path)

    store.remap_material(model_path, material.name, material_path)
    return extracted
