"""
Leaf condition form for reqtree.
"""

import logging
from typing import Any, Dict, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QFormLayout, QLabel, QWidget

from ..conditions.models import ConditionError, is_sentinel
from ..conditions.node import ConditionNode
from .field_editors import FieldEditor, create_field_editor

ERROR_STYLE = "color: #b00020;"


class LeafForm(QWidget):
    """
    Field editors for one leaf ConditionNode.

    Editors are built from the node's current field specs and fed from the
    bus snapshot; rebuild() re-creates them after the reference data changed.
    """

    changed = Signal()

    def __init__(self, node: ConditionNode, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.node = node
        self.editors: Dict[str, FieldEditor] = {}

        self.form = QFormLayout(self)
        self.form.setContentsMargins(0, 0, 0, 0)
        self.error_label: QLabel

        self.rebuild()

    def rebuild(self) -> None:
        """Re-create every editor from the node's state."""
        while self.form.rowCount():
            self.form.removeRow(0)
        self.editors = {}

        # removeRow deletes row widgets, the error label included
        self.error_label = QLabel()
        self.error_label.setStyleSheet(ERROR_STYLE)
        self.error_label.setWordWrap(True)

        specs = self.node.field_specs()
        if not specs and is_sentinel(self.node.kind):
            self.form.addRow(QLabel(self.node.info.description))

        snapshot = self.node.snapshot
        for spec in specs:
            editor = create_field_editor(spec, snapshot, self.node.leaf_state.get(spec.name))
            editor.value_changed.connect(
                lambda value, name=spec.name: self._on_field_changed(name, value)
            )
            self.editors[spec.name] = editor
            self.form.addRow(f"{spec.display_label}:", editor)

        self.form.addRow(self.error_label)
        self.update_errors()
        self.logger.debug(f"Leaf form for '{self.node.kind}' built with {len(specs)} fields")

    def _on_field_changed(self, name: str, value: Any) -> None:
        try:
            self.node.set_leaf_field(name, value)
        except ConditionError as e:
            self.logger.warning(f"Field '{name}' not applied: {e}")
            return
        self.update_errors()
        self.changed.emit()

    def update_errors(self) -> None:
        errors = self.node.errors()
        self.error_label.setText("\n".join(errors))
        self.error_label.setVisible(bool(errors))
