"""Verification query synthesis.

Walks each answer's explanation tree and rebuilds a self-contained
pattern a verifier can run without the reasoner's internal state:
internal ids stripped, instance identity restored through keys, and
every rule application reified as a resolution fact.
"""

from veritrace.reconstruction.batch import BatchDriver
from veritrace.reconstruction.fresh import FreshVariableAllocator
from veritrace.reconstruction.identity import (
    IdentityFilter,
    has_id_property,
    rendered_marker_predicate,
)
from veritrace.reconstruction.inference import build_inference_facts
from veritrace.reconstruction.keys import generate_key_statements
from veritrace.reconstruction.reconstructor import Reconstructor, reconstruct
from veritrace.reconstruction.reifier import PropertyReifier

__all__ = [
    "BatchDriver",
    "FreshVariableAllocator",
    "IdentityFilter",
    "has_id_property",
    "rendered_marker_predicate",
    "build_inference_facts",
    "generate_key_statements",
    "Reconstructor",
    "reconstruct",
    "PropertyReifier",
]
