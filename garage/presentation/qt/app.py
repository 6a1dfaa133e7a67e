from __future__ import annotations

import sys

from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QApplication

from garage.bootstrap.runtime import init_environment
from garage.presentation.qt.app_vm import get_vm
from garage.presentation.qt.shell.main_window import MainWindow
from garage.presentation.qt.style import app_stylesheet


def main() -> int:
    init_environment()
    get_vm()  # Ensure container + viewmodels are initialized.
    app = QApplication(sys.argv)
    app.setStyleSheet(app_stylesheet())
    app.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.GeneralFont))
    window = MainWindow()
    window.resize(760, 480)
    window.show()
    return app.exec()
