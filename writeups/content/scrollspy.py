"""
Active-heading tracking for the table of contents.

The page reports heading visibility in batches (one batch per intersection
callback). A heading counts as visible while it sits inside the tracking band:
the viewport minus a fixed top margin and the bottom two-thirds. Among the
headings currently inside the band, the one closest to the band's top edge is
the active one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intersection:
    """One observation: ``top`` is the heading's offset from the viewport top, in px."""

    id: str
    is_intersecting: bool
    top: float = 0.0


@dataclass(frozen=True)
class TrackingBand:
    top: float
    bottom: float

    @classmethod
    def for_viewport(cls, height: float, margin_top=None, bottom_ratio=None) -> "TrackingBand":
        if margin_top is None:
            margin_top = getattr(settings, "TOC_ROOT_MARGIN_TOP", 100)
        if bottom_ratio is None:
            bottom_ratio = getattr(settings, "TOC_ROOT_MARGIN_BOTTOM_RATIO", 0.66)
        return cls(top=float(margin_top), bottom=float(height) * (1 - bottom_ratio))

    def contains(self, top: float) -> bool:
        return self.top <= top <= self.bottom

    def root_margin(self, height: float) -> str:
        """The band expressed as an IntersectionObserver ``rootMargin``."""
        bottom_pct = round((1 - self.bottom / height) * 100) if height else 0
        return f"-{int(self.top)}px 0px -{bottom_pct}% 0px"


class ScrollSpy:
    """
    Tracks which observed heading is active.

    ``observe`` replaces the set of headings being watched and drops any state
    about the previous set. After ``disconnect`` every callback is ignored, so
    late batches from a torn-down view cannot change the state.
    """

    def __init__(
        self,
        band: TrackingBand,
        heading_ids: Iterable[str] = (),
        on_change: Callable[[str | None], None] | None = None,
    ):
        self.band = band
        self.on_change = on_change
        self._order: dict[str, int] = {}
        self._visible: dict[str, float] = {}
        self._active: str | None = None
        self._connected = False
        self.observe(heading_ids)

    @property
    def active_id(self) -> str | None:
        return self._active

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def heading_ids(self) -> list[str]:
        return list(self._order)

    def observe(self, heading_ids: Iterable[str]) -> None:
        self._visible.clear()
        self._order = {heading_id: index for index, heading_id in enumerate(heading_ids)}
        self._connected = bool(self._order)
        if self._active is not None and self._active not in self._order:
            self._set_active(None)

    def disconnect(self) -> None:
        self._connected = False
        self._visible.clear()

    def process(self, entries: Iterable[Intersection]) -> str | None:
        """Apply one batch of observations and return the active heading id."""
        if not self._connected:
            return self._active

        for entry in entries:
            if entry.id not in self._order:
                logger.debug("Ignoring observation for unknown heading %r", entry.id)
                continue
            if entry.is_intersecting:
                self._visible[entry.id] = entry.top
            else:
                self._visible.pop(entry.id, None)

        if self._visible:
            nearest = min(
                self._visible,
                key=lambda heading_id: (
                    abs(self._visible[heading_id] - self.band.top),
                    self._order[heading_id],
                ),
            )
            self._set_active(nearest)
        return self._active

    def activate(self, heading_id: str) -> bool:
        """Mark a heading active right away, ahead of the next observation batch."""
        if not self._connected or heading_id not in self._order:
            return False
        self._set_active(heading_id)
        return True

    def _set_active(self, heading_id: str | None) -> None:
        if heading_id == self._active:
            return
        self._active = heading_id
        if self.on_change is not None:
            self.on_change(heading_id)
