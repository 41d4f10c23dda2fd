"""In-memory planning store for testing."""

from ..planning.models import PlanningState


class InMemoryStore:
    """PlanningStore that keeps the last saved state. For tests and demos."""

    def __init__(self, state: PlanningState | None = None):
        self._state = state or PlanningState()
        self.save_count = 0

    def load(self) -> PlanningState:
        return self._state

    def save(self, state: PlanningState) -> None:
        self._state = state
        self.save_count += 1
