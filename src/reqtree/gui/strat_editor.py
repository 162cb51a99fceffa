"""
Strat editor widget for reqtree.
"""

import logging
from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QGroupBox, QVBoxLayout, QWidget

from ..conditions.models import INDENT_SIZE
from ..data.strat import StratConditions
from .condition_widget import ConditionNodeWidget
from .transition_form import TransitionForm


class StratEditorWidget(QWidget):
    """Entrance form, requires tree and exit form of one strat."""

    changed = Signal()
    status_message = Signal(str)

    def __init__(
        self,
        strat: StratConditions,
        indent_size: int = INDENT_SIZE,
        auto_expand: bool = True,
        show_transitions: bool = True,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.strat = strat
        self.indent_size = indent_size
        self.auto_expand = auto_expand

        layout = QVBoxLayout(self)

        self.entrance_form = TransitionForm("Entrance condition", strat.entrance)
        self.entrance_form.changed.connect(self.changed)
        layout.addWidget(self.entrance_form)

        self.requires_group = QGroupBox("Requires")
        self.requires_layout = QVBoxLayout(self.requires_group)
        self.tree_widget = self._create_tree_widget()
        layout.addWidget(self.requires_group)

        self.exit_form = TransitionForm("Exit condition", strat.exit)
        self.exit_form.changed.connect(self.changed)
        layout.addWidget(self.exit_form)

        layout.addStretch()
        self.set_transitions_visible(show_transitions)

    def _create_tree_widget(self) -> ConditionNodeWidget:
        widget = ConditionNodeWidget(self.strat.requires, self.indent_size, self.auto_expand)
        widget.changed.connect(self.changed)
        widget.status_message.connect(self.status_message)
        self.requires_layout.addWidget(widget)
        return widget

    def set_strat(self, strat: StratConditions) -> None:
        """Show another strat; the previous tree widget is released."""
        self.tree_widget.release()
        self.requires_layout.removeWidget(self.tree_widget)
        self.tree_widget.deleteLater()

        self.strat = strat
        self.entrance_form.set_condition(strat.entrance)
        self.exit_form.set_condition(strat.exit)
        self.tree_widget = self._create_tree_widget()
        self.logger.debug("Strat editor reloaded")

    def set_transitions_visible(self, visible: bool) -> None:
        self.entrance_form.setVisible(visible)
        self.exit_form.setVisible(visible)

    def expand_all(self) -> None:
        self.tree_widget.set_collapsed(False)

    def collapse_all(self) -> None:
        self.tree_widget.set_collapsed(True)

    def release(self) -> None:
        self.tree_widget.release()
