"""Group unbound references into the per-name report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from scoping import GlobalReference, SourcePosition
from scoping.nodes import Node


@dataclass(frozen=True, eq=False)
class GlobalGroup:
    """Every unbound use of one name, in source order."""

    name: str
    references: Tuple[GlobalReference, ...]

    @property
    def nodes(self) -> List[Node]:
        return [reference.node for reference in self.references]

    @property
    def positions(self) -> List[SourcePosition]:
        return [reference.position for reference in self.references]


def group_globals(references: Iterable[GlobalReference]) -> List[GlobalGroup]:
    """Group references by name; groups sorted by name, members kept in order."""
    grouped: Dict[str, List[GlobalReference]] = {}
    for reference in references:
        grouped.setdefault(reference.name, []).append(reference)
    return [
        GlobalGroup(name=name, references=tuple(grouped[name]))
        for name in sorted(grouped)
    ]


__all__ = ["GlobalGroup", "group_globals"]
