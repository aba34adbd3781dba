"""Tests for the command-line entry point."""

import json

import pytest

import main


class TestMain:

    def test_scene_summary(self, capsys):
        assert main.main(["a tiny rotating cube", "--no-templates"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["success"] is True
        assert out["scene"]["shape"] == "box"
        assert out["scene"]["scale"] == [0.5, 0.5, 0.5]
        assert out["scene"]["animations"] == ["rotate"]
        assert out["scene"]["template"] is None
        assert out["mesh"]["vertices"] > 0

    def test_character_summary(self, capsys):
        assert main.main(["a winged dragon", "--character", "--quality", "low", "--intensity", "0.5"]) == 0
        out = json.loads(capsys.readouterr().out)
        char = out["character"]
        assert char["type"] == "creature"
        assert "wing_r" in char["bones"]
        assert char["vertex_budget"] == 5_000
        assert set(char["animations"]) == {"idle", "walk"}

    def test_bad_quality_rejected_by_argparse(self):
        with pytest.raises(SystemExit):
            main.main(["a cat", "--character", "--quality", "potato"])

    def test_failure_exit_code(self, capsys):
        assert main.main(["a cat", "--character", "--intensity", "nan"]) == 1
        out = json.loads(capsys.readouterr().out)
        assert out["success"] is False
        assert out["error"].startswith("Generation failed")

    def test_theme_and_scale_flags(self, capsys):
        assert main.main(["a cube", "--no-templates", "--theme", "abstract", "--scale", "1", "2", "3"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["scene"]["theme"] == "abstract"
        assert out["scene"]["scale"] == [1.0, 2.0, 3.0]
