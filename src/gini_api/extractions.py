"""
Extraction and layout payloads.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Box:
    """Position of an extraction on a page."""

    height: float = 0.0
    left: float = 0.0
    page: int = 0
    top: float = 0.0
    width: float = 0.0

    @classmethod
    def from_api_response(cls, data: dict) -> "Box":
        return cls(
            height=float(data.get("height", 0.0)),
            left=float(data.get("left", 0.0)),
            page=int(data.get("page", 0)),
            top=float(data.get("top", 0.0)),
            width=float(data.get("width", 0.0)),
        )


@dataclass
class Extraction:
    """A single extracted value (e.g. iban, amountToPay)."""

    entity: str = ""
    value: str = ""
    # Name of the candidates list this extraction was picked from
    candidates: str = ""
    box: Box | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Extraction":
        box = data.get("box")
        return cls(
            entity=data.get("entity", ""),
            value=data.get("value", ""),
            candidates=data.get("candidates", ""),
            box=Box.from_api_response(box) if box else None,
        )


@dataclass
class Extractions:
    """Document extractions plus the candidate lists they were chosen from."""

    extractions: dict[str, Extraction] = field(default_factory=dict)
    candidates: dict[str, list[Extraction]] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, data: dict) -> "Extractions":
        if not isinstance(data, dict):
            raise TypeError(f"expected JSON object, got {type(data).__name__}")

        extractions = {
            name: Extraction.from_api_response(item)
            for name, item in (data.get("extractions") or {}).items()
        }
        candidates = {
            name: [Extraction.from_api_response(item) for item in items]
            for name, items in (data.get("candidates") or {}).items()
        }
        return cls(extractions=extractions, candidates=candidates)

    def get_value(self, name: str) -> str:
        """Value of the named extraction, "" if it wasn't extracted."""
        extraction = self.extractions.get(name)
        return extraction.value if extraction else ""


@dataclass
class Layout:
    """Document layout. Kept as the raw JSON tree."""

    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, data: dict) -> "Layout":
        if not isinstance(data, dict):
            raise TypeError(f"expected JSON object, got {type(data).__name__}")
        return cls(data=data)

    @property
    def pages(self) -> list[dict]:
        return self.data.get("pages", [])
