"""
Sidecar metadata loading

Every exported model may have a JSON description beside it with the same base
name. Many assets legitimately have none, so a missing sidecar is reported as
`None` and never raised.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from wowunity.exceptions import MetadataParseError
from wowunity.schema import M2Metadata, TerrainChunk

logger = logging.getLogger(__name__)


def metadata_path_for(model_path: str, extension: str = ".json") -> str:
    """
    Sidecar path for a model asset path.

    Example:
        >>> metadata_path_for("Assets/World/tree_01.obj")
        'Assets/World/tree_01.json'
    """
    return Path(model_path).with_suffix(extension).as_posix()


def chunk_path_for(model_path: str, material_name: str) -> str:
    """Terrain layer file: named after the material, beside the chunk model"""
    return (Path(model_path).parent / f"{material_name}.json").as_posix()


def read_metadata_for(
    model_path: str,
    project_root: str = ".",
    extension: str = ".json"
) -> Optional[M2Metadata]:
    """
    Load the sidecar description for a model.

    Args:
        model_path: Model asset path, relative to project_root
        project_root: Directory asset paths are relative to
        extension: Sidecar extension

    Returns:
        Parsed metadata, or None if the model has no sidecar

    Raises:
        MetadataParseError: If the sidecar exists but is malformed
    """
    sidecar = metadata_path_for(model_path, extension)
    full_path = Path(project_root) / sidecar

    if not full_path.is_file():
        logger.debug(f"No metadata for {model_path}")
        return None

    data = _load_json(full_path, sidecar)
    try:
        return M2Metadata.model_validate(data)
    except ValidationError as e:
        raise MetadataParseError(sidecar, str(e)) from e


def read_terrain_chunk(chunk_path: str, project_root: str = ".") -> Optional[TerrainChunk]:
    """
    Load a terrain chunk layer description.

    Returns:
        Parsed chunk, or None if the file does not exist

    Raises:
        MetadataParseError: If the file exists but is malformed
    """
    full_path = Path(project_root) / chunk_path
    if not full_path.is_file():
        return None

    data = _load_json(full_path, chunk_path)
    try:
        return TerrainChunk.model_validate(data)
    except ValidationError as e:
        raise MetadataParseError(chunk_path, str(e)) from e


def _load_json(full_path: Path, display_path: str):
    try:
        with open(full_path, 'r', encoding='utf-8-sig') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MetadataParseError(display_path, f"invalid JSON ({e})") from e
    except UnicodeDecodeError as e:
        raise MetadataParseError(display_path, f"not valid UTF-8 ({e})") from e
    except OSError as e:
        raise MetadataParseError(display_path, f"unreadable ({e})") from e
