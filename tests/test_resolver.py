"""
Test material record resolution and base color lookup
"""
import pytest
from wowunity.schema import M2Metadata, MaterialFlags, BlendMode
from wowunity.materials.resolver import get_material_data, process_material_colors


def _metadata(textures, materials, **extra):
    return M2Metadata.model_validate({
        "textures": [{"mtlName": name} for name in textures],
        "materials": materials,
        **extra,
    })


class TestGetMaterialData:
    """Test name → flags/blend record correlation"""

    def test_matching_texture(self):
        """Test the basic one-texture, one-material case"""
        meta = _metadata(["skin"], [{"flags": 0, "blendingMode": 2}])
        data = get_material_data("skin", meta)
        assert data.flags == MaterialFlags.NONE
        assert data.blending_mode == BlendMode.ALPHA

    def test_empty_textures_default(self):
        """Test that no textures gives the default record"""
        meta = _metadata([], [{"flags": 1, "blendingMode": 4}])
        data = get_material_data("anything", meta)
        assert data.flags == MaterialFlags.NONE
        assert data.blending_mode == BlendMode.OPAQUE

    def test_no_match_default(self):
        """Test that an unknown material name gives the default record"""
        meta = _metadata(["a", "b"], [{"flags": 1, "blendingMode": 4}, {"flags": 4, "blendingMode": 1}])
        data = get_material_data("c", meta)
        assert data.flags == MaterialFlags.NONE
        assert data.blending_mode == BlendMode.OPAQUE

    def test_index_correlation(self):
        """Test that texture position selects the material at the same position"""
        meta = _metadata(
            ["a", "b", "c"],
            [{"flags": 0, "blendingMode": 0}, {"flags": 4, "blendingMode": 1}, {"flags": 1, "blendingMode": 7}]
        )
        assert get_material_data("b", meta).blending_mode == BlendMode.ALPHA_KEY
        assert get_material_data("c", meta).flags == MaterialFlags.UNLIT

    def test_index_clamped_to_last_material(self):
        """Test that 5 textures / 3 materials resolves position 4 to materials[2]"""
        meta = _metadata(
            ["t0", "t1", "t2", "t3", "t4"],
            [
                {"flags": 0, "blendingMode": 0},
                {"flags": 0, "blendingMode": 1},
                {"flags": 4, "blendingMode": 6},
            ]
        )
        data = get_material_data("t4", meta)
        assert data == meta.materials[2]
        assert data.blending_mode == BlendMode.MOD2X

    def test_no_materials_default(self):
        """Test that a matching texture but empty material list gives the default"""
        meta = _metadata(["skin"], [])
        data = get_material_data("skin", meta)
        assert data.blending_mode == BlendMode.OPAQUE

    def test_no_metadata_default(self):
        """Test that missing metadata gives the default record"""
        assert get_material_data("skin", None).flags == MaterialFlags.NONE

    @pytest.mark.parametrize("name", ["a", "b", "missing", ""])
    def test_result_uses_defined_enums(self, name):
        """Test that resolved values always come from the enumerations"""
        meta = _metadata(["a", "b"], [{"flags": 0xFF, "blendingMode": 5}])
        data = get_material_data(name, meta)
        assert isinstance(data.flags, MaterialFlags)
        assert isinstance(data.blending_mode, BlendMode)


def _color_track(rgb):
    return {"color": {"timestamps": [[0]], "values": [[rgb]]}, "alpha": {"timestamps": [[0]], "values": [[1.0]]}}


class TestProcessMaterialColors:
    """Test texture unit → color track lookup"""

    def test_color_from_matching_unit(self):
        """Test the first RGB key of the unit's color track"""
        meta = _metadata(
            ["body", "glow"],
            [],
            skin={"textureUnits": [
                {"geosetIndex": 0, "colorIndex": 1},
                {"geosetIndex": 1, "colorIndex": 0},
            ]},
            colors=[_color_track([0.1, 0.2, 0.3]), _color_track([0.9, 0.8, 0.7])],
        )
        color = process_material_colors("glow", meta)
        assert (color.r, color.g, color.b, color.a) == pytest.approx((0.1, 0.2, 0.3, 1.0))

        color = process_material_colors("body", meta)
        assert (color.r, color.g, color.b) == pytest.approx((0.9, 0.8, 0.7))

    def test_no_skin_white(self):
        """Test that metadata without a skin gives white"""
        meta = _metadata(["body"], [], colors=[_color_track([0.1, 0.2, 0.3])])
        color = process_material_colors("body", meta)
        assert (color.r, color.g, color.b, color.a) == (1.0, 1.0, 1.0, 1.0)

    def test_no_matching_unit_white(self):
        """Test that no texture unit for the texture position gives white"""
        meta = _metadata(
            ["body"], [],
            skin={"textureUnits": [{"geosetIndex": 3, "colorIndex": 0}]},
            colors=[_color_track([0.1, 0.2, 0.3])],
        )
        assert process_material_colors("body", meta).r == 1.0

    def test_color_index_out_of_range_white(self):
        """Test that a color index past the color list gives white"""
        meta = _metadata(
            ["body"], [],
            skin={"textureUnits": [{"geosetIndex": 0, "colorIndex": 4}]},
            colors=[_color_track([0.1, 0.2, 0.3])],
        )
        assert process_material_colors("body", meta).g == 1.0

    def test_unknown_material_white(self):
        """Test that a name matching no texture gives white"""
        meta = _metadata(
            ["body"], [],
            skin={"textureUnits": [{"geosetIndex": 0, "colorIndex": 0}]},
            colors=[_color_track([0.1, 0.2, 0.3])],
        )
        assert process_material_colors("other", meta).b == 1.0

    def test_empty_color_track_white(self):
        """Test that a color entry without keys gives white"""
        meta = _metadata(
            ["body"], [],
            skin={"textureUnits": [{"geosetIndex": 0, "colorIndex": 0}]},
            colors=[{"color": {"timestamps": [], "values": []}}],
        )
        assert process_material_colors("body", meta).r == 1.0
