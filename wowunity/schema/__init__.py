"""Sidecar schema definitions."""
from .m2json import (
    M2Metadata,
    Texture,
    Material,
    MaterialFlags,
    BlendMode,
    Interpolation,
    Skin,
    SubMesh,
    TextureUnit,
    ColorData,
    TextureTransform,
    MultiValueTrack,
    SingleValueTrack,
)
from .chunk import TerrainChunk, Layer

__all__ = [
    "M2Metadata",
    "Texture",
    "Material",
    "MaterialFlags",
    "BlendMode",
    "Interpolation",
    "Skin",
    "SubMesh",
    "TextureUnit",
    "ColorData",
    "TextureTransform",
    "MultiValueTrack",
    "SingleValueTrack",
    "TerrainChunk",
    "Layer",
]
