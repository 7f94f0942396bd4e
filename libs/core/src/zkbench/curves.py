
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple


@dataclass(frozen=True)
class CurveID:
    """Opaque handle for an elliptic-curve backend.

    `display_name` is the canonical name the proof-system library expects;
    `scalar_field` is the modulus constraint systems are built over.
    """
    display_name: str
    scalar_field: int

    @property
    def key(self) -> str:
        return self.display_name.lower()

    def __str__(self) -> str:
        return self.display_name


class CurveRegistry:
    """Ordered, immutable set of the curves a backend implements."""

    def __init__(self, curves: Iterable[CurveID]) -> None:
        self._curves: Tuple[CurveID, ...] = tuple(curves)

    def enumerate(self) -> Tuple[CurveID, ...]:
        return self._curves

    def names(self) -> list[str]:
        return [c.key for c in self._curves]

    def find(self, name: str) -> Optional[CurveID]:
        """Case-insensitive lookup by canonical name."""
        wanted = name.lower()
        for curve in self._curves:
            if curve.key == wanted:
                return curve
        return None

    def __iter__(self) -> Iterator[CurveID]:
        return iter(self._curves)

    def __len__(self) -> int:
        return len(self._curves)
