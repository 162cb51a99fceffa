"""
Field editors for reqtree.

Each FieldSpec type maps to one small widget. Editors report the raw edited
value through value_changed; coercion and validation stay in the engine.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from ..conditions.data_sources import DataSourceSnapshot
from ..conditions.fields import FieldSpec, default_values
from ..resources import get_action_icon

SPIN_MAXIMUM = 99999
NOT_SET = "(not set)"
LIST_MAX_HEIGHT = 140


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def choice_text(value: Any) -> str:
    """Display text of a choice value (booleans as JSON literals)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class FieldEditor(QWidget):
    """Base class for one field editor."""

    value_changed = Signal(object)

    def __init__(self, spec: FieldSpec, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.spec = spec
        if spec.placeholder:
            self.setToolTip(spec.placeholder)

    def value(self) -> Any:
        raise NotImplementedError

    def set_value(self, value: Any) -> None:
        raise NotImplementedError

    def _emit(self, *_args: Any) -> None:
        self.value_changed.emit(self.value())


class NumberEditor(FieldEditor):
    """Spin box; fields without a default start at a "(not set)" position."""

    def __init__(self, spec: FieldSpec, parent: Optional[QWidget] = None):
        super().__init__(spec, parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        minimum = spec.minimum if spec.minimum is not None else 0
        self.spin: Any
        if spec.type == "int":
            self.spin = QSpinBox()
            minimum = math.floor(minimum) + 1 if spec.exclusive_minimum else math.ceil(minimum)
        else:
            self.spin = QDoubleSpinBox()
            self.spin.setDecimals(2)
            if spec.exclusive_minimum:
                minimum += 0.01

        self._optional = spec.default is None
        self._floor = minimum - 1 if self._optional else minimum
        self.spin.setRange(self._floor, SPIN_MAXIMUM)
        if self._optional:
            self.spin.setSpecialValueText(NOT_SET)
        layout.addWidget(self.spin)

        self.spin.valueChanged.connect(self._emit)

    def value(self) -> Any:
        number = self.spin.value()
        if self._optional and number == self._floor:
            return None
        return number

    def set_value(self, value: Any) -> None:
        number = _to_number(value)
        self.spin.blockSignals(True)
        self.spin.setValue(number if number is not None else self._floor)
        self.spin.blockSignals(False)


class TextEditor(FieldEditor):
    """Line edit for text and hex speeds; comma separated for multiple values."""

    def __init__(self, spec: FieldSpec, parent: Optional[QWidget] = None):
        super().__init__(spec, parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.line_edit = QLineEdit()
        if spec.placeholder:
            self.line_edit.setPlaceholderText(spec.placeholder)
        elif spec.type == "hex":
            self.line_edit.setPlaceholderText("$0.0")
        elif spec.multiple:
            self.line_edit.setPlaceholderText("Comma separated ids")
        layout.addWidget(self.line_edit)

        self.line_edit.textEdited.connect(self._emit)

    def value(self) -> Any:
        text = self.line_edit.text()
        if self.spec.multiple:
            return [part.strip() for part in text.split(",") if part.strip()]
        return text if text.strip() else None

    def set_value(self, value: Any) -> None:
        if value is None:
            text = ""
        elif self.spec.multiple and isinstance(value, (list, tuple)):
            text = ", ".join(str(v) for v in value)
        else:
            text = str(value)
        self.line_edit.setText(text)


class BoolEditor(FieldEditor):
    def __init__(self, spec: FieldSpec, parent: Optional[QWidget] = None):
        super().__init__(spec, parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.check_box = QCheckBox()
        layout.addWidget(self.check_box)
        layout.addStretch()

        self.check_box.toggled.connect(self._emit)

    def value(self) -> Any:
        return self.check_box.isChecked()

    def set_value(self, value: Any) -> None:
        if isinstance(value, str):
            value = value.strip().lower() in ("true", "1", "yes")
        self.check_box.blockSignals(True)
        self.check_box.setChecked(bool(value))
        self.check_box.blockSignals(False)


class ChoiceEditor(FieldEditor):
    """Combo box over the field's choices; stale values stay visible."""

    def __init__(
        self, spec: FieldSpec, choices: Sequence[Any], parent: Optional[QWidget] = None
    ):
        super().__init__(spec, parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.choices = list(choices)
        self.combo = QComboBox()
        self.combo.addItem(NOT_SET, None)
        for choice in self.choices:
            self.combo.addItem(choice_text(choice), choice)
        if len(self.choices) > 20:
            self.combo.setEditable(True)
            self.combo.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        layout.addWidget(self.combo)

        self.combo.currentIndexChanged.connect(self._emit)

    def value(self) -> Any:
        return self.combo.currentData()

    def set_value(self, value: Any) -> None:
        self.combo.blockSignals(True)
        index = 0
        if value is not None:
            index = next(
                (
                    i + 1
                    for i, choice in enumerate(self.choices)
                    if choice == value and type(choice) is type(value)
                ),
                -1,
            )
            if index < 0:
                self.combo.addItem(f"{choice_text(value)} (unavailable)", value)
                index = self.combo.count() - 1
        self.combo.setCurrentIndex(index)
        self.combo.blockSignals(False)


class MultiChoiceEditor(FieldEditor):
    """Checkable list; checked entries form the value."""

    def __init__(
        self, spec: FieldSpec, choices: Sequence[Any], parent: Optional[QWidget] = None
    ):
        super().__init__(spec, parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.list_widget = QListWidget()
        self.list_widget.setMaximumHeight(LIST_MAX_HEIGHT)
        for choice in choices:
            self._add_item(choice_text(choice), choice)
        if not choices:
            self.list_widget.setToolTip("No values available, load reference data")
        layout.addWidget(self.list_widget)

        self.list_widget.itemChanged.connect(self._emit)

    def _add_item(self, text: str, data: Any) -> QListWidgetItem:
        item = QListWidgetItem(text)
        item.setData(Qt.ItemDataRole.UserRole, data)
        item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
        item.setCheckState(Qt.CheckState.Unchecked)
        self.list_widget.addItem(item)
        return item

    def _items(self) -> List[QListWidgetItem]:
        return [self.list_widget.item(i) for i in range(self.list_widget.count())]

    def value(self) -> Any:
        return [
            item.data(Qt.ItemDataRole.UserRole)
            for item in self._items()
            if item.checkState() == Qt.CheckState.Checked
        ]

    def set_value(self, value: Any) -> None:
        selected = list(value) if isinstance(value, (list, tuple)) else []
        self.list_widget.blockSignals(True)
        for item in self._items():
            checked = item.data(Qt.ItemDataRole.UserRole) in selected
            item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
        known = [item.data(Qt.ItemDataRole.UserRole) for item in self._items()]
        for entry in selected:
            if entry not in known:
                item = self._add_item(f"{choice_text(entry)} (unavailable)", entry)
                item.setCheckState(Qt.CheckState.Checked)
        self.list_widget.blockSignals(False)


class GroupEditor(FieldEditor):
    """Nested record edited with a form of child editors."""

    def __init__(
        self,
        spec: FieldSpec,
        snapshot: Optional[DataSourceSnapshot],
        parent: Optional[QWidget] = None,
    ):
        super().__init__(spec, parent)
        self._values: Dict[str, Any] = {}
        self.editors: Dict[str, FieldEditor] = {}

        form = QFormLayout(self)
        form.setContentsMargins(0, 0, 0, 0)
        for child_spec in spec.fields:
            editor = create_field_editor(child_spec, snapshot)
            editor.value_changed.connect(
                lambda value, name=child_spec.name: self._on_child_changed(name, value)
            )
            self.editors[child_spec.name] = editor
            form.addRow(f"{child_spec.display_label}:", editor)

    def _on_child_changed(self, name: str, value: Any) -> None:
        self._values[name] = value
        self._emit()

    def value(self) -> Any:
        return dict(self._values)

    def set_value(self, value: Any) -> None:
        self._values = dict(value) if isinstance(value, dict) else {}
        for name, editor in self.editors.items():
            editor.set_value(self._values.get(name))


class RepeatedChoiceEditor(FieldEditor):
    """One combo box per entry, for selections that may repeat."""

    def __init__(
        self, spec: FieldSpec, choices: Sequence[Any], parent: Optional[QWidget] = None
    ):
        super().__init__(spec, parent)
        self.choices = list(choices)
        self.rows: List[ChoiceEditor] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.rows_layout = QVBoxLayout()
        layout.addLayout(self.rows_layout)

        self.add_button = QPushButton("Add")
        self.add_button.setIcon(get_action_icon("mdi.plus"))
        self.add_button.clicked.connect(self._on_add_clicked)
        layout.addWidget(self.add_button, alignment=Qt.AlignmentFlag.AlignLeft)

    def _add_row(self, value: Any) -> ChoiceEditor:
        row_widget = QWidget()
        row_layout = QHBoxLayout(row_widget)
        row_layout.setContentsMargins(0, 0, 0, 0)

        row = ChoiceEditor(self.spec, self.choices)
        row.set_value(value)
        row.value_changed.connect(self._emit)
        row_layout.addWidget(row, 1)

        remove_button = QPushButton()
        remove_button.setIcon(get_action_icon("mdi.close"))
        remove_button.setToolTip("Remove entry")
        remove_button.clicked.connect(lambda: self._remove_row(row, row_widget))
        row_layout.addWidget(remove_button)

        self.rows.append(row)
        self.rows_layout.addWidget(row_widget)
        return row

    def _remove_row(self, row: ChoiceEditor, row_widget: QWidget) -> None:
        self.rows = [existing for existing in self.rows if existing is not row]
        self.rows_layout.removeWidget(row_widget)
        row_widget.deleteLater()
        self._emit()

    def _on_add_clicked(self) -> None:
        self._add_row(None)
        self._emit()

    def value(self) -> Any:
        return [row.value() for row in self.rows]

    def set_value(self, value: Any) -> None:
        while self.rows_layout.count():
            item = self.rows_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self.rows = []
        for entry in value if isinstance(value, (list, tuple)) else []:
            self._add_row(entry)


class GroupListEditor(FieldEditor):
    """Repeated records with add and remove buttons."""

    def __init__(
        self,
        spec: FieldSpec,
        snapshot: Optional[DataSourceSnapshot],
        parent: Optional[QWidget] = None,
    ):
        super().__init__(spec, parent)
        self.snapshot = snapshot
        self.rows: List[GroupEditor] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.rows_layout = QVBoxLayout()
        layout.addLayout(self.rows_layout)

        self.add_button = QPushButton(f"Add {spec.display_label.lower()}")
        self.add_button.setIcon(get_action_icon("mdi.plus"))
        self.add_button.clicked.connect(self._on_add_clicked)
        layout.addWidget(self.add_button, alignment=Qt.AlignmentFlag.AlignLeft)

    def _add_row(self, value: Dict[str, Any]) -> GroupEditor:
        frame = QFrame()
        frame.setFrameShape(QFrame.Shape.StyledPanel)
        row_layout = QHBoxLayout(frame)

        row = GroupEditor(self.spec, self.snapshot)
        row.set_value(value)
        row.value_changed.connect(self._emit)
        row_layout.addWidget(row, 1)

        remove_button = QPushButton()
        remove_button.setIcon(get_action_icon("mdi.close"))
        remove_button.setToolTip("Remove entry")
        remove_button.clicked.connect(lambda: self._remove_row(row, frame))
        row_layout.addWidget(remove_button, alignment=Qt.AlignmentFlag.AlignTop)

        self.rows.append(row)
        self.rows_layout.addWidget(frame)
        return row

    def _remove_row(self, row: GroupEditor, frame: QFrame) -> None:
        self.rows = [existing for existing in self.rows if existing is not row]
        self.rows_layout.removeWidget(frame)
        frame.deleteLater()
        self._emit()

    def _on_add_clicked(self) -> None:
        self._add_row(default_values(self.spec.fields))
        self._emit()

    def value(self) -> Any:
        return [row.value() for row in self.rows]

    def set_value(self, value: Any) -> None:
        while self.rows_layout.count():
            item = self.rows_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self.rows = []
        for entry in value if isinstance(value, (list, tuple)) else []:
            self._add_row(entry if isinstance(entry, dict) else {})


def create_field_editor(
    spec: FieldSpec,
    snapshot: Optional[DataSourceSnapshot] = None,
    value: Any = None,
    parent: Optional[QWidget] = None,
) -> FieldEditor:
    """Editor widget for spec, initialized with value."""
    editor: FieldEditor
    if spec.type == "group":
        if spec.multiple:
            editor = GroupListEditor(spec, snapshot, parent)
        else:
            editor = GroupEditor(spec, snapshot, parent)
    elif spec.type == "choice":
        choices = spec.choice_values(snapshot)
        if spec.multiple and not spec.unique:
            editor = RepeatedChoiceEditor(spec, choices, parent)
        elif spec.multiple:
            editor = MultiChoiceEditor(spec, choices, parent)
        else:
            editor = ChoiceEditor(spec, choices, parent)
    elif spec.type in ("int", "float") and spec.minimum is not None:
        editor = NumberEditor(spec, parent)
    elif spec.type in ("int", "float"):
        # unbounded values (heights, positions) may be negative
        editor = TextEditor(spec, parent)
    elif spec.type == "bool":
        editor = BoolEditor(spec, parent)
    else:
        editor = TextEditor(spec, parent)
    editor.set_value(value)
    return editor
