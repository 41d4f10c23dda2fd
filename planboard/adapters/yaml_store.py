"""YAML directory planning store.

Each collection lives in its own document under the data directory, so
state survives process restarts, unlike InMemoryStore::

    <data_dir>/features.yaml
    <data_dir>/sprints.yaml
    <data_dir>/run_rates.yaml
    <data_dir>/logs.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..planning.models import PlanningState
from .serialization import (
    feature_from_dict,
    feature_to_dict,
    log_from_dict,
    log_to_dict,
    run_rates_from_dict,
    run_rates_to_dict,
    sprint_from_dict,
    sprint_to_dict,
)

logger = logging.getLogger(__name__)

FEATURES_FILE = "features.yaml"
SPRINTS_FILE = "sprints.yaml"
RUN_RATES_FILE = "run_rates.yaml"
LOGS_FILE = "logs.yaml"


class YamlStore:
    """PlanningStore backed by YAML files in a directory."""

    def __init__(self, data_dir: Path):
        self._dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def exists(self) -> bool:
        return (self._dir / FEATURES_FILE).exists()

    def load(self) -> PlanningState:
        features = self._read(FEATURES_FILE) or []
        sprints = self._read(SPRINTS_FILE) or []
        run_rates = self._read(RUN_RATES_FILE) or {}
        logs = self._read(LOGS_FILE) or []
        state = PlanningState(
            features=[feature_from_dict(d) for d in features],
            sprints=[sprint_from_dict(d) for d in sprints],
            run_rates=run_rates_from_dict(run_rates),
            logs=[log_from_dict(d) for d in logs],
        )
        logger.debug(
            "Loaded %d features, %d sprints from %s",
            len(state.features), len(state.sprints), self._dir,
        )
        return state

    def save(self, state: PlanningState) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        self._write(FEATURES_FILE, [feature_to_dict(f) for f in state.features])
        self._write(SPRINTS_FILE, [sprint_to_dict(s) for s in state.sprints])
        self._write(RUN_RATES_FILE, run_rates_to_dict(state.run_rates))
        self._write(LOGS_FILE, [log_to_dict(e) for e in state.logs])
        logger.info("Saved planning state to %s", self._dir)

    def _read(self, name: str) -> Any:
        path = self._dir / name
        if not path.exists():
            return None
        with path.open(encoding="utf-8") as fh:
            return yaml.safe_load(fh)

    def _write(self, name: str, data: Any) -> None:
        # Written beside the target, then renamed over it.
        path = self._dir / name
        tmp = path.with_suffix(".yaml.tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, sort_keys=False, allow_unicode=True)
        tmp.replace(path)
