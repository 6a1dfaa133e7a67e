"""NHTSA vPIC VIN decoder (https://vpic.nhtsa.dot.gov/api/)."""

from __future__ import annotations

import urllib.parse
from typing import Any, Dict, List, Optional

from garage.domain.entities import DecodedVin
from garage.domain.ports import VinDecoderPort
from garage.infrastructure.http_json import request_json

DEFAULT_API_BASE = "https://vpic.nhtsa.dot.gov/api"

# vPIC "Variable" label -> descriptor field
_FIELDS = {
    "Make": "make",
    "Model": "model",
    "Model Year": "year",
    "Body Class": "body_class",
}


def parse_decode_results(results: List[Dict[str, Any]]) -> Optional[DecodedVin]:
    if not results:
        return None
    values: Dict[str, str] = {}
    for row in results:
        if not isinstance(row, dict):
            continue
        label = row.get("Variable")
        value = row.get("Value")
        if not isinstance(label, str) or value in (None, ""):
            continue
        values[label] = str(value).strip()

    fields = {name: values.get(label, "") for label, name in _FIELDS.items()}
    return DecodedVin(
        make=fields["make"],
        model=fields["model"],
        year=fields["year"],
        body_class=fields["body_class"] or None,
    )


class VpicClient(VinDecoderPort):
    def __init__(self, api_base: Optional[str] = None, timeout: float = 20.0) -> None:
        self.api_base = (api_base or DEFAULT_API_BASE).rstrip("/")
        self.timeout = timeout

    def decode(self, vin: str) -> Optional[DecodedVin]:
        url = f"{self.api_base}/vehicles/DecodeVin/{urllib.parse.quote(vin)}?format=json"
        data = request_json("GET", url, timeout=self.timeout)
        results = data.get("Results")
        if not isinstance(results, list):
            return None
        return parse_decode_results(results)
