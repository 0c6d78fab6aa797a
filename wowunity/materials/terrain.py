"""Terrain chunk (ADT) material configurator"""

import logging
import os
from typing import Optional

from wowunity.materials.material import MaterialAsset, MaterialDescription, DIFFUSE_PROPERTY
from wowunity.metadata import chunk_path_for, read_terrain_chunk

logger = logging.getLogger(__name__)

ADT_CHUNK_SHADER = "wow.unity/TerrainChunk"
MAX_LAYERS = 4


def configure_material(
    description: MaterialDescription,
    material: MaterialAsset,
    model_path: str,
    store,
    project_root: str = "."
) -> MaterialAsset:
    """
    Terrain chunk shader with per-layer textures and packed scales.

    Raises:
        MetadataParseError: If the chunk layer file is malformed
    """
    material.shader = ADT_CHUNK_SHADER

    diffuse = description.try_get_texture(DIFFUSE_PROPERTY)
    if diffuse is not None:
        material.set_texture("_BaseMap", diffuse)

    load_metadata_and_configure_adt(material, model_path, store, project_root)
    return material


def load_metadata_and_configure_adt(
    material: MaterialAsset,
    model_path: str,
    store,
    project_root: str = "."
) -> None:
    chunk_path = chunk_path_for(model_path, material.name)
    chunk = read_terrain_chunk(chunk_path, project_root)
    if chunk is None:
        logger.warning(f"Terrain layer file not found for '{material.name}': {chunk_path}")
        return

    layers = chunk.layers
    if len(layers) > MAX_LAYERS:
        logger.warning(
            f"Chunk '{material.name}' has {len(layers)} layers, only the first {MAX_LAYERS} are used"
        )
        layers = layers[:MAX_LAYERS]

    scale = [0.0] * MAX_LAYERS
    for i, layer in enumerate(layers):
        texture_path = resolve_layer_path(model_path, layer.file)
        if store.load_asset(texture_path) is None:
            logger.warning(f"Layer texture not found: {texture_path}")
            material.set_texture(f"Layer_{i}", None)
        else:
            material.set_texture(f"Layer_{i}", texture_path)
        scale[i] = layer.scale

    material.set_vector("Scale", scale)


def resolve_layer_path(model_path: str, layer_file: str) -> str:
    """
    Layer file relative to the chunk model, as an `Assets/...` path.

    Example:
        >>> resolve_layer_path("Assets/Maps/adt_32_48.obj", "../tex/grass.png")
        'Assets/tex/grass.png'
    """
    path = os.path.normpath(os.path.join(os.path.dirname(model_path), layer_file.replace('\\', '/')))
    path = path.replace(os.sep, '/')
    index = _assets_index(path)
    return path[index:] if index is not None else path


def _assets_index(path: str) -> Optional[int]:
    if path.startswith("Assets/"):
        return 0
    index = path.find("/Assets/")
    return index + 1 if index >= 0 else None
