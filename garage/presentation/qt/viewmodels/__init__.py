from garage.presentation.qt.viewmodels.image_vm import ImageDialogViewModel
from garage.presentation.qt.viewmodels.intake_vm import IntakeViewModel

__all__ = [
    "ImageDialogViewModel",
    "IntakeViewModel",
]
