"""
Tests for the wowunity CLI

These run against a throwaway project directory using the filesystem store.
"""

import json
import pytest
from pathlib import Path
from click.testing import CliRunner
from wowunity.cli import cli


OBJ = """# exported model
mtllib waterfall.mtl
o waterfall
v 0 0 0
usemtl mat_water
f 1 1 1
"""

MTL = """newmtl mat_water
Kd 1 1 1
map_Kd tex/water.png

newmtl mat_rock
map_Kd tex/rock.png
"""

SIDECAR = {
    "fileName": "world/waterfall.m2",
    "textures": [{"mtlName": "mat_water"}, {"mtlName": "mat_rock"}],
    "materials": [{"flags": 0, "blendingMode": 2}, {"flags": 4, "blendingMode": 0}],
    "textureTransforms": [
        {"translation": {"timestamps": [[0, 1000], [2000, 3000]], "values": [[[0, 0, 0], [0, 1, 0]], [[0, 0, 0], [0, 2, 0]]]}}
    ],
}


@pytest.fixture
def project(tmp_path):
    world = tmp_path / "Assets" / "World"
    (world / "tex").mkdir(parents=True)
    (world / "waterfall.obj").write_text(OBJ)
    (world / "waterfall.mtl").write_text(MTL)
    (world / "waterfall.json").write_text(json.dumps(SIDECAR))
    (world / "tex" / "water.png").write_bytes(b"")
    return tmp_path


class TestCLI:
    """Test CLI command structure and basic functionality"""

    def test_cli_help(self):
        """Test that CLI help works"""
        runner = CliRunner()
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'wowunity' in result.output
        assert 'process' in result.output
        assert 'inspect' in result.output

    def test_process_help(self):
        """Test that process command help works"""
        runner = CliRunner()
        result = runner.invoke(cli, ['process', '--help'])
        assert result.exit_code == 0
        assert 'Post-process a batch' in result.output
        assert '--project-root' in result.output
        assert '--pipeline' in result.output
        assert '--dry-run' in result.output

    def test_process_requires_paths(self):
        """Test that process needs at least one model path"""
        runner = CliRunner()
        result = runner.invoke(cli, ['process'])
        assert result.exit_code != 0

    def test_process_missing_project_root(self):
        """Test that a missing project root is reported"""
        runner = CliRunner()
        result = runner.invoke(cli, ['process', '--project-root', '/nonexistent/project', 'Assets/a.obj'])
        assert result.exit_code != 0
        assert 'not found' in result.output.lower()

    def test_process_writes_assets(self, project):
        """Test that process writes prefab, materials, remaps and clips"""
        runner = CliRunner()
        result = runner.invoke(cli, ['process', '--project-root', str(project), 'Assets/World/waterfall.obj'])

        assert result.exit_code == 0, result.output
        assert 'Success' in result.output

        prefab = json.loads((project / "Assets/World/waterfall.prefab").read_text())
        assert prefab["is_static"] is True
        assert prefab["children"][0]["materials"] == ["mat_water", "mat_rock"]

        water = json.loads((project / "Assets/Materials/mat_water.mat").read_text())
        assert water["override_tags"] == {"RenderType": "Transparent"}
        assert water["textures"]["_BaseMap"] == "Assets/World/tex/water.png"

        rock = json.loads((project / "Assets/Materials/mat_rock.mat").read_text())
        assert rock["double_sided_gi"] is True

        remaps = json.loads((project / "Assets/World/waterfall.obj.remap.json").read_text())
        assert remaps == {
            "mat_water": "Assets/Materials/mat_water.mat",
            "mat_rock": "Assets/Materials/mat_rock.mat",
        }

        clip = json.loads((project / "Assets/World/waterfall[0].anim").read_text())
        assert len(clip["curves"][0]["segments"]) == 2

    def test_process_dry_run(self, project):
        """Test that a dry run writes nothing"""
        runner = CliRunner()
        result = runner.invoke(cli, ['process', '--dry-run', '--project-root', str(project), 'Assets/World/waterfall.obj'])

        assert result.exit_code == 0, result.output
        assert 'clips=1' in result.output
        assert not (project / "Assets/World/waterfall.prefab").exists()
        assert not (project / "Assets/Materials").exists()

    def test_process_skips_without_metadata(self, project):
        """Test that models without a sidecar are reported as skipped"""
        runner = CliRunner()
        result = runner.invoke(cli, ['process', '--project-root', str(project), 'Assets/World/other.obj'])
        assert result.exit_code == 0
        assert 'skipped' in result.output

    def test_process_reports_failures(self, project):
        """Test that a malformed sidecar gives a non-zero exit"""
        (project / "Assets/World/broken.json").write_text("{")
        runner = CliRunner()
        result = runner.invoke(cli, [
            'process', '--project-root', str(project),
            'Assets/World/broken.obj', 'Assets/World/waterfall.obj'
        ])
        assert result.exit_code == 1
        assert 'failed' in result.output
        assert (project / "Assets/World/waterfall.prefab").exists()

    def test_inspect(self, project):
        """Test inspecting one model's derived data"""
        runner = CliRunner()
        result = runner.invoke(cli, ['inspect', '--project-root', str(project), 'Assets/World/waterfall.obj'])

        assert result.exit_code == 0, result.output
        assert 'mat_water: flags=NONE blending=ALPHA' in result.output
        assert 'mat_rock: flags=TWO_SIDED blending=OPAQUE' in result.output
        assert 'clip[0]: 3 curves' in result.output

    def test_inspect_missing_metadata(self, project):
        """Test that inspect reports a missing sidecar"""
        runner = CliRunner()
        result = runner.invoke(cli, ['inspect', '--project-root', str(project), 'Assets/World/other.obj'])
        assert result.exit_code != 0
        assert 'No metadata' in result.output

    def test_pipeline_from_env(self, project, monkeypatch):
        """Test that WOWUNITY_RENDER_PIPELINE selects the builtin pipeline"""
        monkeypatch.setenv("WOWUNITY_RENDER_PIPELINE", "builtin")
        runner = CliRunner()
        result = runner.invoke(cli, ['process', '--project-root', str(project), 'Assets/World/waterfall.obj'])

        assert result.exit_code == 0, result.output
        water = json.loads((project / "Assets/Materials/mat_water.mat").read_text())
        assert water["shader"] == "Standard"

    def test_inspect_invalid_pipeline_env(self, project, monkeypatch):
        """Test that inspect reports an unknown WOWUNITY_RENDER_PIPELINE"""
        monkeypatch.setenv("WOWUNITY_RENDER_PIPELINE", "vulkan")
        runner = CliRunner()
        result = runner.invoke(cli, ['inspect', '--project-root', str(project), 'Assets/World/waterfall.obj'])

        assert result.exit_code == 1
        assert 'Error' in result.output
        assert not isinstance(result.exception, ValueError)
