"""Tests for kuhn_cfr/config.py — YAML configuration loading and saving."""

from __future__ import annotations

from pathlib import Path

import pytest

from kuhn_cfr.config import Config, OutputConfig, TrainingConfig, load_config, save_config

DEFAULT_YAML = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


class TestDefaults:
    def test_training_defaults(self):
        training = TrainingConfig()
        assert training.method == "cfr"
        assert training.exploration is None
        assert training.seed == 42

    def test_output_defaults(self):
        assert OutputConfig().heatmap_path is None

    def test_shipped_default_matches_dataclasses(self):
        assert load_config(DEFAULT_YAML) == Config()


class TestLoadConfig:
    def test_partial_sections(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("training:\n  method: mccfr\n  exploration: 0.2\n")
        config = load_config(path)
        assert config.training.method == "mccfr"
        assert config.training.exploration == 0.2
        assert config.training.iterations == TrainingConfig().iterations
        assert config.output == OutputConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_section_raises(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("model:\n  layers: 3\n")
        with pytest.raises(ValueError, match="Unknown config sections"):
            load_config(path)

    def test_unknown_key_raises(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("training:\n  learning_rate: 0.1\n")
        with pytest.raises(ValueError, match="Invalid keys"):
            load_config(path)


class TestSaveConfig:
    def test_roundtrip(self, tmp_path):
        config = Config(
            training=TrainingConfig(method="mccfr", iterations=500, exploration=0.3),
            output=OutputConfig(heatmap_path="out/h.png"),
        )
        path = tmp_path / "nested" / "saved.yaml"
        save_config(config, path)
        assert path.exists()
        assert load_config(path) == config
