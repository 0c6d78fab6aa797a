"""
Asset store: the host asset pipeline as seen by the post-processor.

The derivation code only talks to the `AssetStore` protocol. Two stores ship
with the package:

- InMemoryAssetStore: dictionary backed, used for dry runs and tests
- FileSystemAssetStore: writes generated materials, clips and prefabs as JSON
  documents under a project root, and reads `.obj` models through the `.mtl`
  library they reference (material names and diffuse maps only, no geometry)
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from wowunity.animation import AnimationClip
from wowunity.materials.material import MaterialAsset, MaterialDescription, DIFFUSE_PROPERTY

logger = logging.getLogger(__name__)

TEXTURE_EXTENSIONS = {'.png', '.tga', '.jpg', '.jpeg', '.blp', '.dds'}


#########################
# ASSET TYPES
#########################

@dataclass
class Renderer:
    """A renderer of an imported model and the materials on its submeshes"""
    name: str
    materials: List[MaterialAsset] = field(default_factory=list)
    descriptions: List[MaterialDescription] = field(default_factory=list)


@dataclass
class ImportedModel:
    path: str
    name: str
    renderers: List[Renderer] = field(default_factory=list)


@dataclass
class TextureRef:
    path: str


class PrefabNode(BaseModel):
    name: str
    is_static: bool = False
    materials: List[str] = Field(default_factory=list, description="Material asset paths or names.")


class Prefab(BaseModel):
    name: str
    source_model: str
    is_static: bool = False
    children: List[PrefabNode] = Field(default_factory=list)


#########################
# PROTOCOL
#########################

class AssetStore(Protocol):
    def load_asset(self, path: str) -> Optional[Any]:
        """Asset at `path`, or None if there is none"""
        ...

    def create_asset(self, asset: Any, path: str) -> None:
        ...

    def instantiate_prefab(self, model: ImportedModel) -> Prefab:
        ...

    def save_prefab(self, instance: Prefab, path: str) -> Prefab:
        ...

    def remap_material(self, model_path: str, material_name: str, material_path: str) -> None:
        """Point the model's imported sub-material at an external material asset"""
        ...

    def refresh(self) -> None:
        ...


def _instantiate(model: ImportedModel) -> Prefab:
    return Prefab(
        name=model.name,
        source_model=model.path,
        children=[
            PrefabNode(name=r.name, materials=[m.name for m in r.materials])
            for r in model.renderers
        ],
    )


#########################
# IN-MEMORY STORE
#########################

class InMemoryAssetStore:
    """
    Dictionary-backed store. Reads fall through to `backing` when given, so
    a project on disk can be processed without writing to it.

    Example:
        >>> store = InMemoryAssetStore()
        >>> store.add_model(ImportedModel("Assets/tree.obj", "tree"))
        >>> store.load_asset("Assets/tree.obj").name
        'tree'
    """

    def __init__(self, backing: Optional[AssetStore] = None):
        self.backing = backing
        self.assets: Dict[str, Any] = {}
        self.remaps: Dict[str, Dict[str, str]] = {}
        self.refresh_count = 0

    def add_model(self, model: ImportedModel) -> None:
        self.assets[model.path] = model

    def load_asset(self, path: str) -> Optional[Any]:
        if path in self.assets:
            return self.assets[path]
        if self.backing is not None:
            return self.backing.load_asset(path)
        return None

    def create_asset(self, asset: Any, path: str) -> None:
        self.assets[path] = asset

    def instantiate_prefab(self, model: ImportedModel) -> Prefab:
        return _instantiate(model)

    def save_prefab(self, instance: Prefab, path: str) -> Prefab:
        prefab = instance.model_copy(deep=True)
        self.assets[path] = prefab
        return prefab

    def remap_material(self, model_path: str, material_name: str, material_path: str) -> None:
        self.remaps.setdefault(model_path, {})[material_name] = material_path

    def refresh(self) -> None:
        self.refresh_count += 1


#########################
# FILESYSTEM STORE
#########################

class FileSystemAssetStore:
    """
    Store rooted at a project directory. Asset paths are relative to it.

    Generated assets are JSON documents: `.mat` holds a MaterialAsset, `.anim`
    an AnimationClip, `.prefab` a Prefab.
    """

    def __init__(self, project_root: str = "."):
        self.project_root = Path(project_root)

    def _full(self, path: str) -> Path:
        return self.project_root / path

    def load_asset(self, path: str) -> Optional[Any]:
        full_path = self._full(path)
        if not full_path.is_file():
            return None

        ext = full_path.suffix.lower()
        if ext == '.mat':
            return MaterialAsset.model_validate_json(full_path.read_text(encoding='utf-8'))
        if ext == '.anim':
            return AnimationClip.model_validate_json(full_path.read_text(encoding='utf-8'))
        if ext == '.prefab':
            return Prefab.model_validate_json(full_path.read_text(encoding='utf-8'))
        if ext == '.obj':
            return self._load_obj(path)
        if ext in TEXTURE_EXTENSIONS:
            return TextureRef(path)

        logger.debug(f"Unsupported asset type: {path}")
        return None

    def create_asset(self, asset: Any, path: str) -> None:
        full_path = self._full(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(asset.model_dump_json(indent=2), encoding='utf-8')

    def instantiate_prefab(self, model: ImportedModel) -> Prefab:
        return _instantiate(model)

    def save_prefab(self, instance: Prefab, path: str) -> Prefab:
        self.create_asset(instance, path)
        return instance

    def remap_material(self, model_path: str, material_name: str, material_path: str) -> None:
        remap_path = self._full(model_path + ".remap.json")
        remaps = {}
        if remap_path.is_file():
            with open(remap_path, 'r', encoding='utf-8') as f:
                remaps = json.load(f)
        remaps[material_name] = material_path
        with open(remap_path, 'w', encoding='utf-8') as f:
            json.dump(remaps, f, indent=2)

    def refresh(self) -> None:
        logger.debug(f"Refreshed asset database at {self.project_root}")

    def _load_obj(self, path: str) -> ImportedModel:
        """Materials of an OBJ model, read from its material library"""
        model_dir = os.path.dirname(path)
        stem = Path(path).stem
        materials: List[MaterialAsset] = []
        descriptions: List[MaterialDescription] = []

        for library in self._material_libraries(path):
            lib_path = os.path.normpath(os.path.join(model_dir, library)).replace(os.sep, '/')
            full_lib = self._full(lib_path)
            if not full_lib.is_file():
                logger.warning(f"Material library not found: {lib_path}")
                continue

            lib_dir = os.path.dirname(lib_path)
            current: Optional[MaterialDescription] = None
            with open(full_lib, 'r', encoding='utf-8', errors='replace') as f:
                for line in f:
                    parts = line.strip().split(maxsplit=1)
                    if len(parts) < 2:
                        continue
                    keyword, value = parts
                    if keyword == 'newmtl':
                        current = MaterialDescription(name=value)
                        descriptions.append(current)
                        materials.append(MaterialAsset(name=value))
                    elif keyword == 'map_Kd' and current is not None:
                        texture = os.path.normpath(os.path.join(lib_dir, value)).replace(os.sep, '/')
                        current.textures[DIFFUSE_PROPERTY] = texture

        return ImportedModel(
            path=path,
            name=stem,
            renderers=[Renderer(name=stem, materials=materials, descriptions=descriptions)],
        )

    def _material_libraries(self, path: str) -> List[str]:
        libraries = []
        with open(self._full(path), 'r', encoding='utf-8', errors='replace') as f:
            for line in f:
                if line.startswith('mtllib '):
                    libraries.append(line[len('mtllib '):].strip())
        if not libraries:
            libraries.append(Path(path).with_suffix('.mtl').name)
        return libraries
