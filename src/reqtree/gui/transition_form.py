"""
Entrance / exit condition form for reqtree.
"""

import logging
from typing import Any, Dict, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QComboBox, QFormLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from ..conditions.models import ConditionError
from ..conditions.transitions import (
    TOILET_CHOICES,
    EntranceCondition,
    TransitionCondition,
    kind_label,
)
from .field_editors import FieldEditor, create_field_editor
from .leaf_form import ERROR_STYLE


class TransitionForm(QGroupBox):
    """Kind picker plus field editors for an EntranceCondition or ExitCondition."""

    changed = Signal()

    def __init__(
        self, title: str, condition: TransitionCondition, parent: Optional[QWidget] = None
    ):
        super().__init__(title, parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.condition = condition
        self.editors: Dict[str, FieldEditor] = {}

        layout = QVBoxLayout(self)

        header = QFormLayout()
        self.kind_combo = QComboBox()
        self.kind_combo.addItem(condition.EMPTY_LABEL, "")
        for kind in condition.kinds():
            self.kind_combo.addItem(kind_label(kind), kind)
        header.addRow("Kind:", self.kind_combo)

        self.toilet_combo: Optional[QComboBox] = None
        if isinstance(condition, EntranceCondition):
            self.toilet_combo = QComboBox()
            self.toilet_combo.addItems(list(TOILET_CHOICES))
            self.toilet_combo.setToolTip("Whether the entrance passes through the Toilet")
            header.addRow("Comes through toilet:", self.toilet_combo)
        layout.addLayout(header)

        self.fields_widget = QWidget()
        self.fields_form = QFormLayout(self.fields_widget)
        self.fields_form.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.fields_widget)

        self.error_label = QLabel()
        self.error_label.setStyleSheet(ERROR_STYLE)
        self.error_label.setWordWrap(True)
        layout.addWidget(self.error_label)

        self._sync_header()
        self._build_fields()

        self.kind_combo.currentIndexChanged.connect(self._on_kind_changed)
        if self.toilet_combo is not None:
            self.toilet_combo.currentTextChanged.connect(self._on_toilet_changed)

    def set_condition(self, condition: TransitionCondition) -> None:
        """Show another condition of the same family."""
        self.condition = condition
        self.kind_combo.blockSignals(True)
        if self.toilet_combo is not None:
            self.toilet_combo.blockSignals(True)
        self._sync_header()
        self.kind_combo.blockSignals(False)
        if self.toilet_combo is not None:
            self.toilet_combo.blockSignals(False)
        self._build_fields()

    def _sync_header(self) -> None:
        index = self.kind_combo.findData(self.condition.kind)
        self.kind_combo.setCurrentIndex(max(index, 0))
        if self.toilet_combo is not None and isinstance(self.condition, EntranceCondition):
            self.toilet_combo.setCurrentText(self.condition.comes_through_toilet)
            self.toilet_combo.setEnabled(self.condition.supports_toilet)

    def _build_fields(self) -> None:
        while self.fields_form.rowCount():
            self.fields_form.removeRow(0)
        self.editors = {}
        for spec in self.condition.field_specs():
            editor = create_field_editor(spec, None, self.condition.values.get(spec.name))
            editor.value_changed.connect(
                lambda value, name=spec.name: self._on_field_changed(name, value)
            )
            self.editors[spec.name] = editor
            self.fields_form.addRow(f"{spec.display_label}:", editor)
        self.fields_widget.setVisible(bool(self.editors))
        self._update_errors()

    def _on_kind_changed(self, _index: int) -> None:
        kind = self.kind_combo.currentData() or ""
        try:
            self.condition.set_kind(kind)
        except ConditionError as e:
            self.logger.warning(f"Kind not applied: {e}")
            return
        self.logger.debug(f"{self.condition.FAMILY} kind set to '{kind}'")
        if self.toilet_combo is not None and isinstance(self.condition, EntranceCondition):
            self.toilet_combo.setEnabled(self.condition.supports_toilet)
        self._build_fields()
        self.changed.emit()

    def _on_toilet_changed(self, text: str) -> None:
        if isinstance(self.condition, EntranceCondition):
            self.condition.comes_through_toilet = text
            self.changed.emit()

    def _on_field_changed(self, name: str, value: Any) -> None:
        try:
            self.condition.set_field(name, value)
        except ConditionError as e:
            self.logger.warning(f"Field '{name}' not applied: {e}")
            return
        self._update_errors()
        self.changed.emit()

    def _update_errors(self) -> None:
        errors = self.condition.errors()
        self.error_label.setText("\n".join(errors))
        self.error_label.setVisible(bool(errors))
