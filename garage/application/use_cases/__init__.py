from garage.application.use_cases.image_generation import ImageGenerationService
from garage.application.use_cases.image_upload import ImageUploadService
from garage.application.use_cases.vin_decode import VinDecodeService

__all__ = [
    "ImageGenerationService",
    "ImageUploadService",
    "VinDecodeService",
]
