"""
Condition tree widgets for reqtree.

One ConditionNodeWidget mirrors one ConditionNode: a colored header with the
kind picker and a body holding either a LeafForm or the child widgets.
"""

import logging
from typing import List, Optional

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ..conditions.data_sources import DataSourceSnapshot
from ..conditions.models import INDENT_SIZE, is_logical, kind_info, selectable_kinds
from ..conditions.node import ConditionNode
from ..resources import get_action_icon, get_kind_icon
from .leaf_form import ERROR_STYLE, LeafForm

ICON_SIZE = QSize(18, 18)


class ConditionNodeWidget(QFrame):
    """Editor for one condition node and, recursively, its children."""

    changed = Signal()
    remove_requested = Signal(object)
    status_message = Signal(str)

    def __init__(
        self,
        node: ConditionNode,
        indent_size: int = INDENT_SIZE,
        auto_expand: bool = True,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.node = node
        self.indent_size = indent_size
        self.auto_expand = auto_expand
        self.child_widgets: List[ConditionNodeWidget] = []
        self.leaf_form: Optional[LeafForm] = None
        self.add_button: Optional[QPushButton] = None

        if not auto_expand and not node.is_root:
            node.collapsed = True

        # Subscribed after the node, so the node has refreshed when we rebuild
        self._unsubscribe = node.bus.subscribe(self._on_data_sources_changed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0 if node.is_root else indent_size, 2, 0, 2)
        layout.setSpacing(2)

        self._setup_header()
        layout.addWidget(self.header)

        self.body = QWidget()
        self.body_layout = QVBoxLayout(self.body)
        self.body_layout.setContentsMargins(0, 0, 0, 0)
        self.body_layout.setSpacing(2)
        layout.addWidget(self.body)

        self._rebuild_body()
        self._update_header()

    # === HEADER ===

    def _setup_header(self) -> None:
        self.header = QFrame()
        self.header.setObjectName("conditionHeader")
        header_layout = QHBoxLayout(self.header)
        header_layout.setContentsMargins(4, 2, 4, 2)

        self.collapse_button = QToolButton()
        self.collapse_button.setAutoRaise(True)
        self.collapse_button.setToolTip("Collapse / expand")
        self.collapse_button.clicked.connect(self._on_collapse_clicked)
        header_layout.addWidget(self.collapse_button)

        self.icon_label = QLabel()
        header_layout.addWidget(self.icon_label)

        self.kind_combo = QComboBox()
        self.kind_combo.setIconSize(ICON_SIZE)
        kinds = selectable_kinds(self.node.is_root)
        if self.node.kind not in kinds:
            # unsupported or nested sentinel kinds loaded from a document
            kinds.append(self.node.kind)
        for kind in kinds:
            self.kind_combo.addItem(get_kind_icon(kind), kind_info(kind).label, kind)
        self.kind_combo.setCurrentIndex(max(self.kind_combo.findData(self.node.kind), 0))
        self.kind_combo.currentIndexChanged.connect(self._on_kind_changed)
        header_layout.addWidget(self.kind_combo)

        self.description_label = QLabel()
        self.description_label.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
        )
        header_layout.addWidget(self.description_label, 1)

        self.remove_button = QToolButton()
        self.remove_button.setAutoRaise(True)
        self.remove_button.setIcon(get_action_icon("mdi.delete-outline"))
        self.remove_button.setToolTip("Remove this condition")
        self.remove_button.clicked.connect(lambda: self.remove_requested.emit(self))
        self.remove_button.setVisible(not self.node.is_root)
        header_layout.addWidget(self.remove_button)

    def _update_header(self) -> None:
        info = self.node.info
        self.header.setStyleSheet(
            f"QFrame#conditionHeader {{ background-color: {info.color}; border-radius: 3px; }}"
        )
        self.icon_label.setPixmap(get_kind_icon(self.node.kind).pixmap(ICON_SIZE))
        self.kind_combo.setToolTip(info.description)

        has_body = bool(self.node.children) or self.node.is_leaf
        self.collapse_button.setEnabled(has_body)
        self.collapse_button.setIcon(
            get_action_icon("mdi.chevron-right" if self.node.collapsed else "mdi.chevron-down")
        )
        self.body.setVisible(not self.node.collapsed)

        errors = self.node.errors()
        self.description_label.setText(self.node.describe())
        self.description_label.setStyleSheet(ERROR_STYLE if errors else "")
        self.description_label.setToolTip("\n".join(errors))

    # === BODY ===

    def _rebuild_body(self) -> None:
        for child_widget in self.child_widgets:
            child_widget.release()
        self.child_widgets = []
        self.leaf_form = None
        self.add_button = None
        while self.body_layout.count():
            item = self.body_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        node = self.node
        if node.is_leaf:
            self.leaf_form = LeafForm(node)
            self.leaf_form.changed.connect(self._on_content_changed)
            self.body_layout.addWidget(self.leaf_form)
        elif is_logical(node.kind):
            for child in node.children:
                self._add_child_widget(child)
            self.add_button = QPushButton("Add condition")
            self.add_button.setIcon(get_action_icon("mdi.plus"))
            self.add_button.clicked.connect(self._on_add_clicked)
            self.body_layout.addWidget(self.add_button, alignment=Qt.AlignmentFlag.AlignLeft)
            self._update_add_button()

    def _add_child_widget(self, child: ConditionNode) -> "ConditionNodeWidget":
        widget = ConditionNodeWidget(child, self.indent_size, self.auto_expand)
        widget.changed.connect(self._on_content_changed)
        widget.remove_requested.connect(self._on_child_remove_requested)
        widget.status_message.connect(self.status_message)
        self.child_widgets.append(widget)
        # keep the add button last
        index = self.body_layout.count() - (1 if self.add_button is not None else 0)
        self.body_layout.insertWidget(index, widget)
        return widget

    def _update_add_button(self) -> None:
        if self.add_button is None:
            return
        at_depth = not self.node.can_add_child
        not_full = self.node.kind == "not" and bool(self.node.children)
        self.add_button.setEnabled(not at_depth and not not_full)
        if at_depth:
            self.add_button.setToolTip(f"Maximum nesting depth {self.node.max_depth} reached")
        elif not_full:
            self.add_button.setToolTip("NOT takes a single condition")
        else:
            self.add_button.setToolTip("Add a sub-condition")

    # === EVENTS ===

    def _on_kind_changed(self, _index: int) -> None:
        kind = self.kind_combo.currentData()
        if kind is None or kind == self.node.kind:
            return
        self.node.set_kind(kind)
        self._rebuild_body()
        self._update_header()
        self.changed.emit()

    def _on_collapse_clicked(self) -> None:
        self.node.toggle_collapse()
        self._update_header()

    def _on_add_clicked(self) -> None:
        child = self.node.add_child()
        if child.is_placeholder:
            self.status_message.emit(f"Maximum nesting depth {self.node.max_depth} reached")
            return
        self._add_child_widget(child)  # type: ignore[arg-type]
        self._update_add_button()
        self._update_header()
        self.changed.emit()

    def _on_child_remove_requested(self, widget: "ConditionNodeWidget") -> None:
        self.node.remove_child(widget.node)
        widget.release()
        self.child_widgets = [w for w in self.child_widgets if w is not widget]
        self.body_layout.removeWidget(widget)
        widget.deleteLater()
        self._update_add_button()
        self._update_header()
        self.changed.emit()

    def _on_content_changed(self) -> None:
        self._update_header()
        self.changed.emit()

    def _on_data_sources_changed(self, snapshot: DataSourceSnapshot) -> None:
        if self.node.removed:
            return
        if self.leaf_form is not None and self.node.handler.uses_data_sources:
            self.leaf_form.rebuild()
            self._update_header()
            self.changed.emit()

    # === PUBLIC ===

    def set_collapsed(self, collapsed: bool, recursive: bool = True) -> None:
        self.node.collapsed = collapsed and not self.node.is_root
        self._update_header()
        if recursive:
            for child_widget in self.child_widgets:
                child_widget.set_collapsed(collapsed, recursive=True)

    def release(self) -> None:
        """Drop bus subscriptions of this widget subtree."""
        for child_widget in self.child_widgets:
            child_widget.release()
        self._unsubscribe()
