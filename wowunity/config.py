"""
Pipeline settings

Defaults match the layout the editor extension expects. Environment variables
override the defaults, and CLI options override both.
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class RenderPipeline(str, Enum):
    urp = "urp"
    builtin = "builtin"


@dataclass
class PipelineSettings:
    """
    Settings for one post-processing run.

    Attributes:
        project_root: Directory that contains the `Assets/` folder. Asset
                      paths handed to the pipeline are relative to it.
        materials_dir: Where extracted material assets are written
        render_pipeline: Which generic-model shader configurator to use
        terrain_chunk_pattern: Regex matched against the model file stem to
                               select the terrain chunk configurator
        metadata_extension: Extension of the sidecar description file
        prefab_extension: Extension of generated prefabs
    """
    project_root: str = "."
    materials_dir: str = "Assets/Materials"
    render_pipeline: RenderPipeline = RenderPipeline.urp
    terrain_chunk_pattern: str = r"adt_\d{2}_\d{2}"
    metadata_extension: str = ".json"
    prefab_extension: str = ".prefab"

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """
        Build settings from WOWUNITY_* environment variables.

        Reads WOWUNITY_PROJECT_ROOT, WOWUNITY_MATERIALS_DIR and
        WOWUNITY_RENDER_PIPELINE ('urp' or 'builtin').

        Raises:
            ValueError: If WOWUNITY_RENDER_PIPELINE is not a known pipeline
        """
        settings = cls()
        pipeline = os.environ.get("WOWUNITY_RENDER_PIPELINE")
        return replace(
            settings,
            project_root=os.environ.get("WOWUNITY_PROJECT_ROOT", settings.project_root),
            materials_dir=os.environ.get("WOWUNITY_MATERIALS_DIR", settings.materials_dir),
            render_pipeline=RenderPipeline(pipeline) if pipeline else settings.render_pipeline,
        )

    def with_overrides(
        self,
        project_root: Optional[str] = None,
        render_pipeline: Optional[str] = None
    ) -> "PipelineSettings":
        """Copy with any non-None overrides applied"""
        settings = self
        if project_root is not None:
            settings = replace(settings, project_root=project_root)
        if render_pipeline is not None:
            settings = replace(settings, render_pipeline=RenderPipeline(render_pipeline))
        return settings
