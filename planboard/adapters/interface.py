"""Persistence protocol for planning state."""

from typing import Protocol

from ..planning.models import PlanningState


class PlanningStore(Protocol):
    """Interface that any planning store must implement.

    Stores deal in whole documents: ``save`` replaces every collection with
    the given state, there are no incremental patches.
    """

    def load(self) -> PlanningState: ...

    def save(self, state: PlanningState) -> None: ...
