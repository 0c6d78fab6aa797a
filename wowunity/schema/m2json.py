"""
M2 Sidecar Schema

Pydantic models for the JSON description written next to every exported M2
model. The exporter writes camelCase keys; attributes here are snake_case and
the exporter key names are kept as aliases, so

    M2Metadata.model_validate(meta.model_dump(by_alias=True)) == meta

holds for every record.

KEYFRAME TRACKS:
A track is split into keyframe groups. Group g has timestamps[g] (integer
milliseconds) and values[g] (one value per timestamp). Groups are separate
animation segments and must never be blended into each other. The shape is
NOT enforced on load: a broken track should only cost its own clip, so the
check lives in `check_shape()` and runs when the track is converted.

TEXTURES vs MATERIALS:
`textures` and `materials` are meant to be parallel, but exported files do not
always have the same number of entries. See
`wowunity.materials.resolver.get_material_data` for how that is tolerated.
"""

from __future__ import annotations
from enum import IntEnum, IntFlag
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, field_serializer

from wowunity.exceptions import AnimationBuildError


#########################
# ENUMERATIONS
#########################

class MaterialFlags(IntFlag):
    NONE = 0x0
    UNLIT = 0x1
    UNFOGGED = 0x2
    TWO_SIDED = 0x4


KNOWN_MATERIAL_FLAGS = MaterialFlags.UNLIT | MaterialFlags.UNFOGGED | MaterialFlags.TWO_SIDED


class BlendMode(IntEnum):
    OPAQUE = 0
    ALPHA_KEY = 1
    ALPHA = 2
    NO_ALPHA_ADD = 3
    ADD = 4
    MOD = 5
    MOD2X = 6
    BLEND_ADD = 7


class Interpolation(IntEnum):
    NONE = 0
    LINEAR = 1
    BEZIER = 2
    HERMITE = 3


class _SidecarModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


#########################
# KEYFRAME TRACKS
#########################

class _Track(_SidecarModel):
    global_seq: int = Field(0, alias='globalSeq', description="Global sequence id (65535 when unused).")
    interpolation: int = Field(0, description="Interpolation code, see Interpolation.")
    timestamps: List[List[int]] = Field(default_factory=list, description="Timestamp groups in milliseconds.")

    def has_keyframes(self) -> bool:
        """True if at least one group carries at least one timestamp"""
        return any(len(group) > 0 for group in self.timestamps)

    def check_shape(self) -> None:
        if len(self.timestamps) != len(self.values):
            raise AnimationBuildError(
                f"Track has {len(self.timestamps)} timestamp groups but {len(self.values)} value groups"
            )
        for g, (times, values) in enumerate(zip(self.timestamps, self.values)):
            if len(times) != len(values):
                raise AnimationBuildError(
                    f"Group {g} has {len(times)} timestamps but {len(values)} values"
                )


class MultiValueTrack(_Track):
    """Track whose keyframes are vectors (RGB, translation, quaternion...)"""
    values: List[List[List[float]]] = Field(default_factory=list)

    def check_shape(self) -> None:
        super().check_shape()
        for g, group in enumerate(self.values):
            for key, vector in enumerate(group):
                if not vector:
                    raise AnimationBuildError(f"Group {g} key {key} has an empty vector")


class SingleValueTrack(_Track):
    """Track whose keyframes are scalars (alpha)"""
    values: List[List[float]] = Field(default_factory=list)


#########################
# SIDECAR RECORDS
#########################

class Texture(_SidecarModel):
    file_name_internal: Optional[str] = Field(None, alias='fileNameInternal')
    file_name_external: Optional[str] = Field(None, alias='fileNameExternal')
    mtl_name: Optional[str] = Field(None, alias='mtlName', description="Name of the material using this texture.")
    flag: int = 0
    file_data_id: int = Field(0, alias='fileDataID')


class Material(_SidecarModel):
    """Resolved material record: render flags plus blending mode."""
    flags: MaterialFlags = MaterialFlags.NONE
    blending_mode: BlendMode = Field(BlendMode.OPAQUE, alias='blendingMode')

    @field_validator('flags', mode='plain')
    @classmethod
    def validate_flags(cls, v):
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"flags must be an integer, got {v!r}")
        # Bits outside the known set carry no meaning for shader selection
        return MaterialFlags(v & KNOWN_MATERIAL_FLAGS)

    @field_validator('blending_mode', mode='plain')
    @classmethod
    def validate_blending_mode(cls, v):
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"blendingMode must be an integer, got {v!r}")
        try:
            return BlendMode(v)
        except ValueError:
            raise ValueError(f"Unknown blendingMode {v}") from None

    @field_serializer('flags', 'blending_mode')
    def serialize_enum(self, v):
        return int(v)


class SubMesh(_SidecarModel):
    enabled: bool = True


class TextureUnit(_SidecarModel):
    skin_selection_index: int = Field(0, alias='skinSelectionIndex')
    geoset_index: int = Field(0, alias='geosetIndex')
    color_index: int = Field(0, alias='colorIndex')


class Skin(_SidecarModel):
    sub_meshes: List[SubMesh] = Field(default_factory=list, alias='subMeshes')
    texture_units: List[TextureUnit] = Field(default_factory=list, alias='textureUnits')


class ColorData(_SidecarModel):
    color: MultiValueTrack = Field(default_factory=MultiValueTrack)
    alpha: SingleValueTrack = Field(default_factory=SingleValueTrack)


class TextureTransform(_SidecarModel):
    translation: MultiValueTrack = Field(default_factory=MultiValueTrack)
    rotation: MultiValueTrack = Field(default_factory=MultiValueTrack)
    scaling: MultiValueTrack = Field(default_factory=MultiValueTrack)


#########################
# TOP-LEVEL MODEL
#########################

class M2Metadata(_SidecarModel):
    file_data_id: int = Field(0, alias='fileDataID')
    file_name: Optional[str] = Field(None, alias='fileName')
    internal_name: Optional[str] = Field(None, alias='internalName')
    skin: Optional[Skin] = None
    textures: List[Texture] = Field(default_factory=list)
    texture_types: List[int] = Field(default_factory=list, alias='textureTypes')
    materials: List[Material] = Field(default_factory=list)
    texture_combos: List[int] = Field(default_factory=list, alias='textureCombos')
    colors: List[ColorData] = Field(default_factory=list)
    texture_transforms: List[TextureTransform] = Field(default_factory=list, alias='textureTransforms')
    texture_transforms_lookup: List[int] = Field(default_factory=list, alias='textureTransformsLookup')

    def find_texture_index(self, material_name: str) -> Optional[int]:
        """Position of the first texture used by `material_name`, or None"""
        for i, texture in enumerate(self.textures):
            if texture.mtl_name == material_name:
                return i
        return None


# Rebuild models for forward references
MultiValueTrack.model_rebuild()
SingleValueTrack.model_rebuild()
Material.model_rebuild()
ColorData.model_rebuild()
TextureTransform.model_rebuild()
Skin.model_rebuild()
M2Metadata.model_rebuild()
