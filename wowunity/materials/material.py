"""
Engine-side material state.

`MaterialAsset` records what the shader configurators decide (shader name and
shader parameters) in a form the asset store can persist. The setter names
follow the engine's material API so the configurators read like editor code.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

RENDER_QUEUE_FROM_SHADER = -1
RENDER_QUEUE_TRANSPARENT = 3000

# Texture property the model importer fills with the diffuse map
DIFFUSE_PROPERTY = "DiffuseColor"


class Color(BaseModel):
    r: float = 1.0
    g: float = 1.0
    b: float = 1.0
    a: float = 1.0

    @classmethod
    def white(cls) -> "Color":
        return cls(r=1.0, g=1.0, b=1.0, a=1.0)


class MaterialAsset(BaseModel):
    name: str
    shader: str = "Standard"
    colors: Dict[str, Color] = Field(default_factory=dict)
    textures: Dict[str, Optional[str]] = Field(default_factory=dict, description="Slot → texture asset path (None when unbound).")
    floats: Dict[str, float] = Field(default_factory=dict)
    vectors: Dict[str, List[float]] = Field(default_factory=dict)
    keywords: List[str] = Field(default_factory=list)
    override_tags: Dict[str, str] = Field(default_factory=dict)
    render_queue: int = RENDER_QUEUE_FROM_SHADER
    double_sided_gi: bool = False
    disabled_shader_passes: List[str] = Field(default_factory=list)

    def set_color(self, name: str, color: Color) -> None:
        self.colors[name] = color

    def set_texture(self, name: str, texture_path: Optional[str]) -> None:
        self.textures[name] = texture_path

    def set_float(self, name: str, value: float) -> None:
        self.floats[name] = float(value)

    def set_vector(self, name: str, value: List[float]) -> None:
        self.vectors[name] = [float(v) for v in value]

    def enable_keyword(self, keyword: str) -> None:
        if keyword not in self.keywords:
            self.keywords.append(keyword)

    def disable_keyword(self, keyword: str) -> None:
        if keyword in self.keywords:
            self.keywords.remove(keyword)

    def is_keyword_enabled(self, keyword: str) -> bool:
        return keyword in self.keywords

    def set_override_tag(self, tag: str, value: str) -> None:
        self.override_tags[tag] = value

    def set_shader_pass_enabled(self, pass_name: str, enabled: bool) -> None:
        if enabled:
            if pass_name in self.disabled_shader_passes:
                self.disabled_shader_passes.remove(pass_name)
        elif pass_name not in self.disabled_shader_passes:
            self.disabled_shader_passes.append(pass_name)

    def get_shader_pass_enabled(self, pass_name: str) -> bool:
        return pass_name not in self.disabled_shader_passes


@dataclass
class MaterialDescription:
    """What the model importer knows about one of its materials"""
    name: str
    textures: Dict[str, str] = field(default_factory=dict)

    def try_get_texture(self, property_name: str) -> Optional[str]:
        return self.textures.get(property_name) or None
