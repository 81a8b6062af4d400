"""Configuration settings for Kuhn poker training runs."""

from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml


@dataclass
class TrainingConfig:
    """Training configuration."""

    method: str = "cfr"  # cfr or mccfr
    iterations: int = 100_000
    exploration: float | None = None  # None = per-method default
    seed: int | None = 42
    log_every: int = 10_000
    progress: bool = False


@dataclass
class OutputConfig:
    """Where optional artefacts are written."""

    heatmap_path: str | None = None
    lookup_html_path: str | None = None


@dataclass
class Config:
    """Complete configuration."""

    training: TrainingConfig = field(default_factory=TrainingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _build_section(cls: type, data: dict | None, section: str):
    try:
        return cls(**(data or {}))
    except TypeError as exc:
        raise ValueError(f"Invalid keys in config section {section!r}: {exc}") from exc


def load_config(path: str | Path) -> Config:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    unknown = set(data) - {"training", "output"}
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")

    config = Config()

    if "training" in data:
        config.training = _build_section(TrainingConfig, data["training"], "training")
    if "output" in data:
        config.output = _build_section(OutputConfig, data["output"], "output")

    return config


def save_config(config: Config, path: str | Path) -> None:
    """Save configuration to YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(asdict(config), f, default_flow_style=False, sort_keys=False)
