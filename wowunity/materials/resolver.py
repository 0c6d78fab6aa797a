"""
Material record and base color lookup.

Both lookups correlate tables by position: the texture list gives an index
into the material list, and into the skin's texture units by geoset index.
"""

import logging
from typing import Optional

from wowunity.schema import M2Metadata, Material, MaterialFlags, BlendMode
from wowunity.materials.material import Color

logger = logging.getLogger(__name__)


def default_material() -> Material:
    return Material(flags=MaterialFlags.NONE, blending_mode=BlendMode.OPAQUE)


def get_material_data(material_name: str, metadata: Optional[M2Metadata]) -> Material:
    """
    Find the flags/blend record for a material.

    The first texture whose mtlName equals `material_name` gives the index
    into `metadata.materials`. Exported files sometimes have fewer materials
    than textures; the index is then clamped to the last material rather
    than failing. Nothing is known about the intended pairing in that case,
    so the clamping must stay exactly as it is.

    Args:
        material_name: Material name as seen on the imported model
        metadata: Parsed sidecar, or None

    Returns:
        Matching record, or the default (flags NONE, blending OPAQUE)
    """
    if metadata is None:
        return default_material()

    index = metadata.find_texture_index(material_name)
    if index is None or not metadata.materials:
        return default_material()

    if index >= len(metadata.materials):
        logger.debug(
            f"Texture index {index} for '{material_name}' exceeds {len(metadata.materials)} "
            f"materials, using last material"
        )
        index = len(metadata.materials) - 1

    return metadata.materials[index]


def process_material_colors(material_name: str, metadata: Optional[M2Metadata]) -> Color:
    """
    Base color for a material from the color animation tables.

    texture position → texture unit with that geoset index → its color index
    → first RGB key of the first group of that color track. Any missing link
    gives opaque white.
    """
    color = Color.white()
    if metadata is None or metadata.skin is None or not metadata.skin.texture_units:
        return color

    texture_index = metadata.find_texture_index(material_name)
    if texture_index is None:
        return color

    unit = next(
        (u for u in metadata.skin.texture_units if u.geoset_index == texture_index),
        None
    )
    if unit is None:
        return color

    if unit.color_index >= len(metadata.colors):
        return color

    track = metadata.colors[unit.color_index].color
    if not track.values or not track.values[0] or len(track.values[0][0]) < 3:
        logger.debug(f"Color track {unit.color_index} for '{material_name}' has no RGB keys")
        return color

    r, g, b = track.values[0][0][:3]
    return Color(r=r, g=g, b=b, a=1.0)
