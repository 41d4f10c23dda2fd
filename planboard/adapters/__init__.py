from .interface import PlanningStore
from .memory import InMemoryStore
from .yaml_store import YamlStore

__all__ = [
    "PlanningStore",
    "InMemoryStore",
    "YamlStore",
]
