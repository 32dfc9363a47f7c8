"""
veritrace
Verification query synthesis for answers of a rule-based reasoner
"""

__version__ = "0.1.0"

from veritrace.answers import (
    Answer,
    AttributeConcept,
    EntityConcept,
    Explanation,
    RelationConcept,
    TypeConcept,
)
from veritrace.lookup import InMemoryLookup, Lookup, load_scenario
from veritrace.pattern import Pattern, Statement, Variable, VerificationQuery, var
from veritrace.reconstruction import BatchDriver, Reconstructor, build_inference_facts, reconstruct
from veritrace.settings import VeritraceSettings, get_settings

__all__ = [
    "Answer",
    "AttributeConcept",
    "EntityConcept",
    "Explanation",
    "RelationConcept",
    "TypeConcept",
    "InMemoryLookup",
    "Lookup",
    "load_scenario",
    "Pattern",
    "Statement",
    "Variable",
    "VerificationQuery",
    "var",
    "BatchDriver",
    "Reconstructor",
    "build_inference_facts",
    "reconstruct",
    "VeritraceSettings",
    "get_settings",
]
