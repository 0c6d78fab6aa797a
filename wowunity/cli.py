"""
wowunity CLI - post-process exported models into prefabs, materials and clips
"""

import click
import logging
import sys
from pathlib import Path

from wowunity.assets import FileSystemAssetStore, InMemoryAssetStore
from wowunity.config import PipelineSettings, RenderPipeline
from wowunity.exceptions import MetadataParseError
from wowunity.animation import derive_animation_clips
from wowunity.materials import get_material_data, process_material_colors
from wowunity.metadata import read_metadata_for
from wowunity.pipeline import process_batch


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )


@click.group()
@click.version_option(package_name="wowunity")
def cli():
    """
    wowunity - Turn exported M2/ADT models into prefabs, materials and clips.

    Examples:
        wowunity process Assets/World/tree.obj Assets/World/waterfall.obj
        wowunity inspect Assets/World/waterfall.obj
    """
    pass


@cli.command()
@click.argument('model_paths', nargs=-1, required=True)
@click.option('--project-root', default=None, help='Directory containing Assets/ (default: $WOWUNITY_PROJECT_ROOT or .)')
@click.option('--pipeline', type=click.Choice([p.value for p in RenderPipeline]), default=None,
              help='Render pipeline for generic model materials (default: urp)')
@click.option('--dry-run', is_flag=True, help='Derive everything but write nothing')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def process(model_paths, project_root, pipeline, dry_run, verbose):
    """
    Post-process a batch of imported models.

    Paths are relative to the project root and processed in the given order.
    Models without a sidecar .json are skipped.

    Examples:
        wowunity process Assets/World/tree.obj
        wowunity process --project-root ~/MyGame --pipeline builtin Assets/Maps/adt_32_48.obj
    """
    _setup_logging(verbose)
    try:
        settings = PipelineSettings.from_env().with_overrides(project_root, pipeline)

        if not Path(settings.project_root).is_dir():
            raise FileNotFoundError(f"Project root not found: {settings.project_root}")

        if dry_run:
            store = InMemoryAssetStore(backing=FileSystemAssetStore(settings.project_root))
        else:
            store = FileSystemAssetStore(settings.project_root)

        results = process_batch(model_paths, store, settings)

        failed = 0
        for result in results:
            if result.status == 'processed':
                click.echo(f"{result.path}: prefab={result.prefab_path}, clips={len(result.clip_paths)}")
            elif result.status == 'skipped':
                click.echo(f"{result.path}: skipped (no metadata)")
            else:
                failed += 1
                click.secho(f"{result.path}: failed ({result.error})", fg='red', err=True)

        if failed:
            click.secho(f"{failed} of {len(results)} models failed", fg='red', err=True)
            sys.exit(1)

        click.secho(f"✓ Success! Processed {len(results)} models", fg='green')

    except FileNotFoundError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


@cli.command()
@click.argument('model_path')
@click.option('--project-root', default=None, help='Directory containing Assets/')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
def inspect(model_path, project_root, verbose):
    """
    Show the material records and clips derived for one model.

    Examples:
        wowunity inspect Assets/World/waterfall.obj
    """
    _setup_logging(verbose)
    try:
        settings = PipelineSettings.from_env().with_overrides(project_root)
        metadata = read_metadata_for(model_path, settings.project_root, settings.metadata_extension)
        if metadata is None:
            raise FileNotFoundError(f"No metadata found for {model_path}")

        click.echo(f"Model: {metadata.file_name or model_path}")
        material_names = []
        for texture in metadata.textures:
            if texture.mtl_name and texture.mtl_name not in material_names:
                material_names.append(texture.mtl_name)

        for name in material_names:
            data = get_material_data(name, metadata)
            color = process_material_colors(name, metadata)
            flags = [f.name for f in type(data.flags) if f and f in data.flags] or ['NONE']
            click.echo(
                f"  {name}: flags={'|'.join(flags)} blending={data.blending_mode.name} "
                f"color=({color.r:.3f}, {color.g:.3f}, {color.b:.3f})"
            )

        for index, clip in derive_animation_clips(metadata.file_name or Path(model_path).stem, metadata):
            click.echo(f"  clip[{index}]: {len(clip.curves)} curves, {clip.length:.3f}s")

    except FileNotFoundError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except MetadataParseError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
