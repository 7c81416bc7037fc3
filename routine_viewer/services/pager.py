from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass
class Pager:
    """Current-day cursor over a plan of ``total`` days.

    Moves never leave ``[0, total-1]``; out-of-range moves are no-ops.
    """

    total: int
    index: int = 0

    def __post_init__(self) -> None:
        if self.total < 1:
            raise ValueError("Pager needs at least one day.")
        self.index = self._clamp(self.index)

    def _clamp(self, index: int) -> int:
        return max(0, min(index, self.total - 1))

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < self.total - 1

    def previous(self) -> bool:
        if not self.has_previous:
            return False
        self.index -= 1
        return True

    def next(self) -> bool:
        if not self.has_next:
            return False
        self.index += 1
        return True

    def resize(self, total: int) -> None:
        """Adopt a new day count, keeping the index when it is still valid."""
        if total < 1:
            raise ValueError("Pager needs at least one day.")
        self.total = total
        self.index = self._clamp(self.index)

    @property
    def position_label(self) -> str:
        return f"Día {self.index + 1} de {self.total}"

    def dots(self) -> List[bool]:
        return [i == self.index for i in range(self.total)]
