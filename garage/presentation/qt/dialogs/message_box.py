from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QMessageBox, QWidget


# Message boxes are opened with open() rather than the static helpers so no
# nested event loop runs while a camera scan or network worker reports back.
_ACTIVE_MESSAGE_BOXES: List[QMessageBox] = []


def _show_message_box(parent: Optional[QWidget], title: str, text: str, *, icon: QMessageBox.Icon) -> None:
    box = QMessageBox(parent)
    box.setIcon(icon)
    box.setWindowTitle(title)
    box.setText(text)
    box.setStandardButtons(QMessageBox.StandardButton.Ok)
    box.setWindowModality(Qt.WindowModality.WindowModal if parent else Qt.WindowModality.ApplicationModal)
    box.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
    _ACTIVE_MESSAGE_BOXES.append(box)

    def _cleanup(_: int) -> None:
        if box in _ACTIVE_MESSAGE_BOXES:
            _ACTIVE_MESSAGE_BOXES.remove(box)

    box.finished.connect(_cleanup)
    QTimer.singleShot(0, box.open)


def ui_info(parent: Optional[QWidget], title: str, text: str) -> None:
    _show_message_box(parent, title, text, icon=QMessageBox.Icon.Information)

