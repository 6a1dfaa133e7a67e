from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject

from garage.bootstrap import AppContainer, get_container
from garage.presentation.qt.viewmodels import ImageDialogViewModel, IntakeViewModel


class MainViewModel(QObject):
    def __init__(self, container: AppContainer) -> None:
        super().__init__()
        self.container = container
        self.settings = container.settings

    def image_dialog_vm(self) -> ImageDialogViewModel:
        return ImageDialogViewModel(self.container.image_generation, self.container.image_upload)

    def intake_vm(self) -> IntakeViewModel:
        return IntakeViewModel(self.container.vin_decode, self.container.scanner_factory)


_VM: Optional[MainViewModel] = None


def get_vm() -> MainViewModel:
    global _VM
    if _VM is None:
        _VM = MainViewModel(get_container())
    return _VM
