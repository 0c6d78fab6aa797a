"""
Universal Render Pipeline configurator for generic model materials.

Starts from Simple Lit with the resolved base color and diffuse map, then
applies the material flags and finally the blending mode. Blend-mode rules
run after flag rules, so when both touch the same setting the blend mode
wins.
"""

import logging
from typing import Callable, Dict, Optional

from wowunity.schema import M2Metadata, Material, MaterialFlags, BlendMode
from wowunity.materials.material import (
    MaterialAsset, MaterialDescription, Color,
    DIFFUSE_PROPERTY, RENDER_QUEUE_TRANSPARENT
)
from wowunity.materials.resolver import get_material_data, process_material_colors

logger = logging.getLogger(__name__)

LIT_SHADER = "Universal Render Pipeline/Simple Lit"
UNLIT_SHADER = "Universal Render Pipeline/Unlit"


def configure_material(
    description: MaterialDescription,
    material: MaterialAsset,
    metadata: Optional[M2Metadata]
) -> MaterialAsset:
    """Configure `material` in place for URP and return it."""
    material_data = get_material_data(material.name, metadata)
    logger.debug(
        f"URP material '{material.name}': flags={int(material_data.flags)} "
        f"blending={material_data.blending_mode.name}"
    )

    color = Color.white()
    if metadata is not None and metadata.colors:
        color = process_material_colors(material.name, metadata)

    material.shader = LIT_SHADER
    material.set_color("_BaseColor", color)

    diffuse = description.try_get_texture(DIFFUSE_PROPERTY)
    if diffuse is not None:
        material.set_texture("_BaseMap", diffuse)

    process_flags_for_material(material, material_data)
    return material


def process_flags_for_material(material: MaterialAsset, data: Material) -> None:
    # Flags first
    if data.flags & MaterialFlags.UNLIT:
        material.shader = UNLIT_SHADER

    if data.flags & MaterialFlags.TWO_SIDED:
        material.double_sided_gi = True
        material.set_float("_Cull", 0)

    # Now blend modes
    BLEND_MODE_RULES[data.blending_mode](material)


def _apply_alpha_key(material: MaterialAsset) -> None:
    material.enable_keyword("_ALPHATEST_ON")
    material.set_float("_AlphaClip", 1)


def _apply_alpha(material: MaterialAsset) -> None:
    material.set_override_tag("RenderType", "Transparent")
    material.set_float("_Blend", 0)
    material.set_float("_Surface", 1)
    material.set_float("_ZWrite", 0)


def _apply_add(material: MaterialAsset) -> None:
    material.set_override_tag("RenderType", "Transparent")
    material.disable_keyword("_ALPHAPREMULTIPLY_ON")
    material.render_queue = RENDER_QUEUE_TRANSPARENT
    material.set_float("_Cutoff", 0)
    material.set_float("_Blend", 1)
    material.set_float("_Surface", 1)
    material.set_float("_SrcBlend", 1)
    material.set_float("_DstBlend", 1)
    material.set_float("_ZWrite", 0)
    material.set_shader_pass_enabled("ShadowCaster", False)


def _unchanged(material: MaterialAsset) -> None:
    pass


# One entry per BlendMode member
BLEND_MODE_RULES: Dict[BlendMode, Callable[[MaterialAsset], None]] = {
    BlendMode.OPAQUE: _unchanged,
    BlendMode.ALPHA_KEY: _apply_alpha_key,
    BlendMode.ALPHA: _apply_alpha,
    BlendMode.NO_ALPHA_ADD: _unchanged,
    BlendMode.ADD: _apply_add,
    BlendMode.MOD: _unchanged,
    BlendMode.MOD2X: _unchanged,
    BlendMode.BLEND_ADD: _unchanged,
}
