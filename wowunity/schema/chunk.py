"""Terrain chunk layer description (written beside each ADT chunk material)"""

from typing import List
from pydantic import BaseModel, Field, ConfigDict


class Layer(BaseModel):
    model_config = ConfigDict(extra='ignore')

    file: str = Field(..., description="Layer texture path, relative to the chunk model directory.")
    scale: float = Field(1.0, description="Tiling scale factor for this layer.")


class TerrainChunk(BaseModel):
    model_config = ConfigDict(extra='ignore')

    layers: List[Layer] = Field(default_factory=list, description="Ordered texture layers.")
