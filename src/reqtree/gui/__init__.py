"""
PySide6 editor for reqtree.
"""

from .condition_widget import ConditionNodeWidget
from .json_display import JsonDisplayWidget
from .leaf_form import LeafForm
from .main_window import MainWindow
from .strat_editor import StratEditorWidget
from .transition_form import TransitionForm

__all__ = [
    "MainWindow",
    "StratEditorWidget",
    "ConditionNodeWidget",
    "LeafForm",
    "TransitionForm",
    "JsonDisplayWidget",
]
