"""Per-element interaction state, kept apart from the glyphs it colours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional


@dataclass
class ElementState:
    hovered: bool = False
    pinned: bool = False

    @property
    def highlighted(self) -> bool:
        return self.hovered or self.pinned


class HighlightState:
    """Hover and click-to-pin flags keyed by element id.

    Hovering is exclusive (one element at a time); pinning toggles per element
    and survives hover changes.
    """

    def __init__(self, keys: Iterable[str] = ()):
        self._states: Dict[str, ElementState] = {key: ElementState() for key in keys}

    def __getitem__(self, key: str) -> ElementState:
        return self._states.setdefault(key, ElementState())

    @property
    def hovered(self) -> Optional[str]:
        return next((key for key, state in self._states.items() if state.hovered), None)

    @property
    def pinned(self) -> List[str]:
        return [key for key, state in self._states.items() if state.pinned]

    def hover(self, key: Optional[str]) -> bool:
        """Move the hover to ``key`` (None clears it); return True if anything changed."""
        if key == self.hovered:
            return False
        for state in self._states.values():
            state.hovered = False
        if key is not None:
            self[key].hovered = True
        return True

    def toggle_pin(self, key: str) -> bool:
        state = self[key]
        state.pinned = not state.pinned
        return state.pinned

    def colors(self, keys: Iterable[str], default: str, highlight: str) -> List[str]:
        return [highlight if self[key].highlighted else default for key in keys]
