"""Planner configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from .planning.models import GLOBAL
from .planning.workdays import CANADIAN_HOLIDAYS_2026


@dataclass
class PlannerConfig:
    """Configuration for a planning workspace."""

    data_dir: str = "planning-data"
    default_system: str = GLOBAL
    sprint_length_days: int = 14
    default_sprint_capacity: int = 40
    suggestion_model: str = "sonnet"
    holidays: dict[int, list[int]] = field(
        default_factory=lambda: {m: list(d) for m, d in CANADIAN_HOLIDAYS_2026.items()}
    )


def load_config(path: Path | None = None) -> PlannerConfig:
    """Read a YAML config file, falling back to defaults when absent."""
    if path is None or not Path(path).exists():
        return PlannerConfig()

    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    known = {f.name for f in fields(PlannerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    if "holidays" in data:
        data["holidays"] = {int(m): [int(d) for d in days] for m, days in data["holidays"].items()}
    return PlannerConfig(**data)
