"""Parser configuration shared by the strict and tolerant strategies."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

SOURCE_TYPES = ("script", "module")


@dataclass(frozen=True)
class ParseOptions:
    """Behaviours enabled on top of plain esprima parsing."""

    allow_return_outside_function: bool = True
    allow_import_export_everywhere: bool = True
    allow_hash_bang: bool = True
    locations: bool = True
    ranges: bool = True
    source_type: str = "script"

    def __post_init__(self) -> None:
        if self.source_type not in SOURCE_TYPES:
            raise ValueError(
                f"source_type must be one of {SOURCE_TYPES}, got {self.source_type!r}"
            )

    def for_analysis(self) -> "ParseOptions":
        """Return a copy with the behaviours global analysis relies on forced on."""
        return replace(
            self,
            allow_return_outside_function=True,
            allow_import_export_everywhere=True,
            allow_hash_bang=True,
            locations=True,
        )

    def to_esprima(self, *, tolerant: bool) -> Dict[str, Any]:
        return dict(
            loc=self.locations,
            range=self.ranges,
            tolerant=tolerant,
            sourceType=self.source_type,
        )


__all__ = ["ParseOptions", "SOURCE_TYPES"]
