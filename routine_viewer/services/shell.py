from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Literal, Optional

from routine_viewer.errors import MalformedPayload
from routine_viewer.models.plan import DayRoutine, WorkoutPlan
from routine_viewer.services.card import render_day_card
from routine_viewer.services.pager import Pager
from routine_viewer.services.url_codec import Address, decode_address


logger = logging.getLogger(__name__)

ViewMode = Literal["loading", "empty", "error", "plan"]


@dataclass
class PlanView:
    day: DayRoutine
    position_label: str
    previous_enabled: bool
    next_enabled: bool
    dots: List[bool]
    card_html: str


@dataclass
class ViewerState:
    """Everything the page shows, owned in one place.

    Other components get the current day or the whole plan and hand results
    back through ``replace_plan``; nothing else mutates this.
    """

    plan: Optional[WorkoutPlan] = None
    pager: Optional[Pager] = None
    error_message: Optional[str] = None
    is_loading: bool = True
    edit_count: int = 0

    def load(self, address: Address) -> None:
        try:
            plan = decode_address(address)
        except MalformedPayload as e:
            self.plan, self.pager = None, None
            self.error_message = str(e)
        else:
            self.error_message = None
            if plan is None:
                self.plan, self.pager = None, None
            else:
                self.plan, self.pager = plan, Pager(total=len(plan))
        finally:
            self.is_loading = False

    @property
    def mode(self) -> ViewMode:
        if self.is_loading:
            return "loading"
        if self.error_message is not None:
            return "error"
        if self.plan:
            return "plan"
        return "empty"

    @property
    def current_index(self) -> int:
        return self.pager.index if self.pager else 0

    @property
    def current_day(self) -> Optional[DayRoutine]:
        if not self.plan or self.pager is None:
            return None
        return self.plan[self.pager.index]

    def previous(self) -> bool:
        return self.pager.previous() if self.pager else False

    def next(self) -> bool:
        return self.pager.next() if self.pager else False

    def replace_plan(self, plan: WorkoutPlan) -> None:
        """Swap in a whole new plan; the index is kept, or clamped if it no longer fits."""
        if not plan:
            raise ValueError("Replacement plan must have at least one day.")
        if self.pager is None:
            self.pager = Pager(total=len(plan))
        else:
            self.pager.resize(len(plan))
        self.plan = list(plan)
        self.error_message = None
        self.edit_count += 1
        logger.info("Plan replaced: %d day(s), showing day %d.", len(plan), self.pager.index + 1)

    def view(self) -> Optional[PlanView]:
        day = self.current_day
        if day is None or self.pager is None:
            return None
        return PlanView(
            day=day,
            position_label=self.pager.position_label,
            previous_enabled=self.pager.has_previous,
            next_enabled=self.pager.has_next,
            dots=self.pager.dots(),
            card_html=render_day_card(day),
        )
