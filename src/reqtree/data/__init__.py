"""
Document I/O and strat bundles for reqtree.
"""

from .loaders import (
    DocumentError,
    load_condition,
    load_json,
    load_reference_data,
    save_condition,
    save_json,
    unwrap_requires,
)
from .strat import STRAT_KEYS, StratConditions, is_strat_document

__all__ = [
    "DocumentError",
    "load_json",
    "save_json",
    "load_reference_data",
    "load_condition",
    "save_condition",
    "unwrap_requires",
    "StratConditions",
    "STRAT_KEYS",
    "is_strat_document",
]
