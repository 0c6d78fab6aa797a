"""
Material derivation

Picks a shader configurator for each imported material:
- model file stem matches the terrain chunk pattern → terrain configurator
- otherwise the configured render pipeline decides (URP, or leave as imported)
"""

import logging
import re
from pathlib import Path
from typing import Optional

from wowunity.config import PipelineSettings, RenderPipeline
from wowunity.schema import M2Metadata
from wowunity.materials.material import MaterialAsset, MaterialDescription, Color
from wowunity.materials.resolver import get_material_data, process_material_colors
from wowunity.materials import terrain, urp

logger = logging.getLogger(__name__)


def is_terrain_chunk(model_path: str, settings: PipelineSettings) -> bool:
    return re.search(settings.terrain_chunk_pattern, Path(model_path).stem) is not None


def configure_material(
    description: MaterialDescription,
    material: MaterialAsset,
    model_path: str,
    metadata: Optional[M2Metadata],
    store,
    settings: Optional[PipelineSettings] = None
) -> MaterialAsset:
    """
    Configure an imported material in place.

    Args:
        description: Importer's description of the material (texture slots)
        material: Material to configure
        model_path: Asset path of the model the material belongs to
        metadata: Parsed model sidecar, or None
        store: Asset store used to look up layer textures
        settings: Pipeline settings (defaults if None)

    Returns:
        The same material
    """
    settings = settings or PipelineSettings()

    if is_terrain_chunk(model_path, settings):
        return terrain.configure_material(description, material, model_path, store, settings.project_root)

    if settings.render_pipeline == RenderPipeline.urp:
        return urp.configure_material(description, material, metadata)

    logger.debug(f"No configurator for pipeline '{settings.render_pipeline.value}', "
                 f"'{material.name}' left as imported")
    return material


__all__ = [
    "configure_material",
    "is_terrain_chunk",
    "get_material_data",
    "process_material_colors",
    "MaterialAsset",
    "MaterialDescription",
    "Color",
]
