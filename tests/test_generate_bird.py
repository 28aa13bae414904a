"""
Tests for export: config, metadata, normalization and the CLI orchestrator.
"""

import argparse
import json

import pytest
import numpy as np
import trimesh
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from generate_bird import parse_override, format_param_table, run_parts, main
from bird_common.config import Config, UnitMode, MeshMetadata
from bird_common.params import BirdParams, ParamField
from bird_common.io import build_metadata, save_mesh, load_mesh
from bird_common.normalize import normalize_meshes
from bird_common import mesh_ops


# ============== Fixtures ==============

@pytest.fixture
def low_res_config(tmp_path):
    """Low-res config writing into a temporary directory."""
    return Config(resolution=8, output_dir=tmp_path / "out", export_format="stl")


# ============== Config Tests ==============

class TestConfig:
    """Test configuration and output paths."""

    def test_tessellation_from_resolution(self):
        config = Config(resolution=12)

        assert config.sphere_segments == 12
        assert config.sphere_stacks == 24

    def test_output_paths(self, tmp_path):
        config = Config(output_dir=tmp_path, export_format="obj")

        assert config.get_output_path("head") == tmp_path / "head.obj"
        assert config.get_meta_path("body") == tmp_path / "body.json"

    def test_save_and_load(self, tmp_path):
        config = Config(resolution=24, unit_mode=UnitMode.NORMALIZED, output_dir=tmp_path)
        path = tmp_path / "config.json"

        config.save(path)
        loaded = Config.from_json(path)

        assert loaded == config


# ============== Normalization Tests ==============

class TestNormalize:
    """Test shared-scale normalization."""

    def test_common_scale(self):
        small = mesh_ops.cuboid(1.0, 1.0, 1.0)
        large = mesh_ops.translate(mesh_ops.cuboid(4.0, 1.0, 1.0), 1.0, 0.0, 0.0)

        scaled, result = normalize_meshes([small, large], target_max_dim=2.0)

        assert result.max_dim_before == pytest.approx(5.0)
        assert result.max_dim_after == pytest.approx(2.0)
        assert result.scale_factor == pytest.approx(0.4)
        np.testing.assert_allclose(scaled[0].extents, [0.4, 0.4, 0.4])
        # alignment between parts is kept
        assert scaled[1].bounds[0][0] == pytest.approx(0.4)

    def test_inputs_untouched(self):
        box = mesh_ops.cuboid(3.0, 1.0, 1.0)
        normalize_meshes([box])
        np.testing.assert_allclose(box.extents, [3.0, 1.0, 1.0])

    def test_empty_list(self):
        with pytest.raises(ValueError):
            normalize_meshes([])


# ============== Mesh Export Tests ==============

class TestMeshExport:
    """Test mesh export with metadata sidecars."""

    def test_build_metadata(self, low_res_config):
        params = BirdParams()
        box = mesh_ops.cuboid(2.0, 3.0, 4.0)

        metadata = build_metadata("body", box, params, low_res_config)

        assert metadata.part == "body"
        assert metadata.unit_mode == "model"
        assert not metadata.normalization_applied
        assert metadata.bbox_max_dimension == pytest.approx(4.0)
        assert metadata.n_triangles == 12
        assert metadata.generation_params["params"]["tail_pitch"] == params.tail_pitch

    def test_save_and_load_mesh(self, low_res_config, tmp_path):
        box = mesh_ops.cuboid(1.0, 1.0, 1.0)
        metadata = build_metadata("head", box, BirdParams(), low_res_config)
        path = tmp_path / "head.stl"

        save_mesh(box, path, metadata)
        loaded, loaded_meta = load_mesh(path)

        assert path.with_suffix(".json").exists()
        assert len(loaded.faces) == 12
        assert isinstance(loaded_meta, MeshMetadata)
        assert loaded_meta.n_vertices == metadata.n_vertices


# ============== CLI Tests ==============

class TestCli:
    """Test argument helpers and the orchestrator."""

    def test_parse_override(self):
        assert parse_override("tail_pitch=60") == (ParamField.TAIL_PITCH, 60.0)
        assert parse_override(" eye_size = 7.5") == (ParamField.EYE_SIZE, 7.5)

    @pytest.mark.parametrize("text", ["tail_pitch", "wing_span=3", "tail_pitch=steep"])
    def test_parse_override_rejects(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_override(text)

    def test_param_table(self):
        table = format_param_table(BirdParams())

        assert table.splitlines()[0] == "[Beak]"
        assert "[Base]" in table
        assert "Head to Belly" in table
        assert len([l for l in table.splitlines() if l.startswith("  ")]) == 22

    def test_run_parts_writes_files(self, low_res_config):
        summary = run_parts(["head", "body"], BirdParams(), low_res_config)

        assert summary["errors"] == []
        for part in ("head", "body"):
            assert summary["parts"][part]["status"] == "success"
            assert low_res_config.get_output_path(part).exists()
            assert low_res_config.get_meta_path(part).exists()

            mesh, metadata = load_mesh(low_res_config.get_output_path(part))
            assert isinstance(mesh, trimesh.Trimesh)
            assert metadata.n_triangles == summary["parts"][part]["metadata"]["n_triangles"]

    def test_run_parts_normalized(self, tmp_path):
        config = Config(
            resolution=8,
            unit_mode=UnitMode.NORMALIZED,
            export_format="stl",
            output_dir=tmp_path
        )
        summary = run_parts(["head", "body"], BirdParams(), config)

        head_meta = summary["parts"]["head"]["metadata"]
        body_meta = summary["parts"]["body"]["metadata"]
        assert head_meta["normalization_applied"]
        assert head_meta["scale_factor"] == body_meta["scale_factor"]
        assert max(head_meta["bbox_max_dimension"], body_meta["bbox_max_dimension"]) <= 2.0 + 1e-6

    def test_run_parts_records_failure(self, low_res_config, monkeypatch):
        """A failing part is recorded and the other part is still exported."""
        import generate_bird

        def broken(params, config):
            raise ValueError("boom")

        monkeypatch.setitem(generate_bird.PART_GENERATORS, "head", broken)
        summary = run_parts(["head", "body"], BirdParams(), low_res_config)

        assert summary["parts"]["head"]["status"] == "error"
        assert summary["errors"] == [{"part": "head", "error": "boom"}]
        assert summary["parts"]["body"]["status"] == "success"

    def test_main_writes_summary(self, tmp_path, monkeypatch):
        params_path = tmp_path / "bird.json"
        params_path.write_text(json.dumps({"tail_length": 30}))
        out = tmp_path / "run"

        monkeypatch.setattr(sys, "argv", [
            "generate_bird.py",
            "--params", str(params_path),
            "--set", "eye_size=0",
            "--parts", "body",
            "--format", "ply",
            "--resolution", "8",
            "--output", str(out),
        ])
        main()

        with open(out / "run_summary.json") as f:
            summary = json.load(f)
        assert summary["params"]["tail_length"] == 30.0
        assert summary["params"]["eye_size"] == 0.0
        assert (out / "body.ply").exists()
        assert not (out / "head.ply").exists()

    def test_main_list_params(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["generate_bird.py", "--list-params", "--set", "beak_length=99", "--clamp"])
        main()

        out = capsys.readouterr().out
        assert "beak_length" in out
        assert "50.0" in out

    def test_main_exits_on_failure(self, tmp_path, monkeypatch):
        import generate_bird

        def broken(params, config):
            raise ValueError("boom")

        monkeypatch.setitem(generate_bird.PART_GENERATORS, "body", broken)
        monkeypatch.setattr(sys, "argv", [
            "generate_bird.py", "--parts", "body", "--resolution", "8", "--output", str(tmp_path)
        ])

        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
