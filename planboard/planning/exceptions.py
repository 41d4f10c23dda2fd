"""Planning exception types."""


class PlanningError(Exception):
    """Base class for recoverable planning validation failures."""


class OverAllocationError(PlanningError):
    """Raised when sprint allocations would exceed a feature's points."""

    def __init__(self, feature_name: str, limit: int, requested: int):
        self.feature_name = feature_name
        self.limit = limit
        self.requested = requested
        super().__init__(
            f"Cannot allocate {requested} pts. Total for '{feature_name}' "
            f"would exceed its limit of {limit} pts."
        )


class SprintOverlapError(PlanningError):
    """Raised when a sprint's date range collides with another sprint."""

    def __init__(self, sprint_id: str, conflicting_ids: list[str]):
        self.sprint_id = sprint_id
        self.conflicting_ids = conflicting_ids
        super().__init__(
            f"Sprint {sprint_id} dates overlap with: {', '.join(conflicting_ids)}"
        )


class DateOrderError(PlanningError):
    """Raised when a start date falls after its end date."""

    def __init__(self, entity_id: str, start_date: str, end_date: str):
        self.entity_id = entity_id
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Start date {start_date} is after end date {end_date} for {entity_id}"
        )


class MalformedDateError(PlanningError, ValueError):
    """Raised when a date string is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Not a YYYY-MM-DD date: {value!r}")


class SprintClosedError(PlanningError):
    """Raised when allocation changes target a closed sprint."""

    def __init__(self, sprint_id: str):
        self.sprint_id = sprint_id
        super().__init__(f"Sprint {sprint_id} is closed; allocations are locked")
