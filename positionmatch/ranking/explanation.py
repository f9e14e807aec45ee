"""PositionMatch Explanation - Score Breakdown Trees.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class Explanation:
    """A node of a score explanation tree.

    Attributes:
        value: Score contributed by this node
        description: Human-readable account of how the value was derived
        details: Child explanations
        is_match: Whether the node describes a match
    """

    value: float
    description: str
    details: List["Explanation"] = field(default_factory=list)
    is_match: bool = True

    @classmethod
    def match(
        cls,
        value: float,
        description: str,
        details: Optional[Sequence["Explanation"]] = None,
    ) -> "Explanation":
        return cls(float(value), description, list(details or []), True)

    @classmethod
    def no_match(
        cls,
        description: str,
        details: Optional[Sequence["Explanation"]] = None,
    ) -> "Explanation":
        return cls(0.0, description, list(details or []), False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "value": self.value,
            "description": self.description,
            "match": self.is_match,
            "details": [d.to_dict() for d in self.details],
        }

    def to_string(self, depth: int = 0) -> str:
        """Render the tree, one node per line, children indented."""
        lines = [f"{'  ' * depth}{self.value} = {self.description}"]
        for detail in self.details:
            lines.append(detail.to_string(depth + 1))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["Explanation"]
