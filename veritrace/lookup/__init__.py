"""Lookup collaborators: query execution and key attribute enumeration."""

from veritrace.lookup.base import Lookup
from veritrace.lookup.memory import InMemoryLookup
from veritrace.lookup.loader import Scenario, load_scenario

__all__ = [
    "Lookup",
    "InMemoryLookup",
    "Scenario",
    "load_scenario",
]
