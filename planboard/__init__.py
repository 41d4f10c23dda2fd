"""Feature and sprint planning with cost and run-rate reconciliation."""

__version__ = "0.1.0"
