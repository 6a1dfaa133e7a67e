from __future__ import annotations

from garage.domain.entities import VehicleDescriptor

PROMPT_PREFIX = "A professional, high-quality photograph of a"
PROMPT_SUFFIX = (
    ". The vehicle should be shown from a 3/4 front angle in a well-lit outdoor "
    "setting with a clean background."
)


def build_generation_prompt(vehicle: VehicleDescriptor) -> str:
    prompt = f"{PROMPT_PREFIX} {vehicle.year} {vehicle.make} {vehicle.model}"
    body_class = (vehicle.body_class or "").strip()
    if body_class:
        prompt += f" {body_class}"
    color = (vehicle.color or "").strip()
    if color:
        prompt += f" in {color} color"
    return prompt + PROMPT_SUFFIX
