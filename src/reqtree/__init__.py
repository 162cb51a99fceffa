"""
reqtree: Visual editor for nested requirement conditions

Edits the requires, entrance and exit conditions of logic documents as
trees of typed nodes, kept in sync with shared reference data.
"""

__version__ = "0.1.0"
__author__ = "reqtree Contributors"

# Condition engine
from .conditions import (
    ConditionError,
    ConditionNode,
    DataSourceBus,
    DataSourceSnapshot,
    EntranceCondition,
    ExitCondition,
    build_tree,
    default_registry,
)

# Documents
from .data import DocumentError, StratConditions, load_condition, load_reference_data

__all__ = [
    # Engine
    'ConditionNode',
    'ConditionError',
    'DataSourceBus',
    'DataSourceSnapshot',
    'EntranceCondition',
    'ExitCondition',
    'build_tree',
    'default_registry',

    # Documents
    'DocumentError',
    'StratConditions',
    'load_condition',
    'load_reference_data',
]
