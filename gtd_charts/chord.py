"""Chord layout and the polygon geometry of arcs and ribbons.

Angles are in radians, measured clockwise from 12 o'clock. Points are
returned in a y-up plane centred on the origin, ready for Bokeh glyphs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from bokeh.colors import RGB

TAU = 2 * math.pi


@dataclass
class ChordGroup:
    index: int
    start_angle: float
    end_angle: float
    value: float

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2


@dataclass
class ChordSubgroup:
    index: int
    start_angle: float
    end_angle: float
    value: float


@dataclass
class Chord:
    source: ChordSubgroup
    target: ChordSubgroup


@dataclass
class ChordLayoutResult:
    groups: List[ChordGroup]
    chords: List[Chord]


class ChordLayout:
    """Angular layout of a square matrix as groups and connecting chords.

    Undirected mode gives each group a span proportional to its row total and
    one chord per pair with a non-zero cell in either direction, the larger
    side becoming the source. Directed mode sizes groups by row plus column
    totals and keeps one chord per non-zero cell.
    """

    def __init__(self, pad_angle: float = 0.0, sort_subgroups: Optional[str] = "descending", directed: bool = False):
        if sort_subgroups not in (None, "ascending", "descending"):
            raise ValueError(f"unknown subgroup order: {sort_subgroups!r}")
        self.pad_angle = pad_angle
        self.sort_subgroups = sort_subgroups
        self.directed = directed

    def __call__(self, matrix: Sequence[Sequence[float]]) -> ChordLayoutResult:
        m = np.asarray(matrix, dtype=float)
        if m.size == 0:
            return ChordLayoutResult(groups=[], chords=[])
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise ValueError(f"chord layout needs a square matrix, got shape {m.shape}")
        if (m < 0).any():
            raise ValueError("chord layout needs a non-negative matrix")

        n = m.shape[0]
        group_sums = m.sum(axis=1) + (m.sum(axis=0) if self.directed else 0)
        total = float(group_sums.sum())
        k = max(0.0, TAU - self.pad_angle * n) / total if total else 0.0
        dx = self.pad_angle if k else TAU / n
        if self.directed:
            return self._directed(m, group_sums, k, dx)
        return self._undirected(m, group_sums, k, dx)

    def _order(self, values: np.ndarray, candidates: List[int]) -> List[int]:
        if self.sort_subgroups == "descending":
            return sorted(candidates, key=lambda j: -values[j])
        if self.sort_subgroups == "ascending":
            return sorted(candidates, key=lambda j: values[j])
        return candidates

    def _undirected(self, m: np.ndarray, group_sums: np.ndarray, k: float, dx: float) -> ChordLayoutResult:
        n = m.shape[0]
        groups = []
        pending: Dict[Tuple[int, int], Dict[str, ChordSubgroup]] = {}
        x = 0.0
        for i in range(n):
            x0 = x
            subgroups = [j for j in range(n) if m[i, j] or m[j, i]]
            for j in self._order(m[i], subgroups):
                value = float(m[i, j])
                span = ChordSubgroup(index=i, start_angle=x, end_angle=x + value * k, value=value)
                x = span.end_angle
                key = (min(i, j), max(i, j))
                sides = pending.setdefault(key, {})
                if i < j:
                    sides["source"] = span
                else:
                    sides["target"] = span
                    if i == j:
                        sides["source"] = span
            groups.append(ChordGroup(index=i, start_angle=x0, end_angle=x, value=float(group_sums[i])))
            x += dx

        chords = []
        for key in sorted(pending, key=lambda ij: ij[0] * n + ij[1]):
            source, target = pending[key]["source"], pending[key]["target"]
            if source.value < target.value:
                source, target = target, source
            chords.append(Chord(source=source, target=target))
        return ChordLayoutResult(groups=groups, chords=chords)

    def _directed(self, m: np.ndarray, group_sums: np.ndarray, k: float, dx: float) -> ChordLayoutResult:
        n = m.shape[0]
        groups = []
        outgoing: Dict[Tuple[int, int], ChordSubgroup] = {}
        incoming: Dict[Tuple[int, int], ChordSubgroup] = {}
        x = 0.0
        for i in range(n):
            x0 = x
            # Outgoing spans first, then incoming spans, both within group i.
            for j in self._order(m[i], [j for j in range(n) if m[i, j]]):
                value = float(m[i, j])
                outgoing[(i, j)] = ChordSubgroup(index=i, start_angle=x, end_angle=x + value * k, value=value)
                x += value * k
            for j in self._order(m[:, i], [j for j in range(n) if m[j, i]]):
                value = float(m[j, i])
                incoming[(j, i)] = ChordSubgroup(index=i, start_angle=x, end_angle=x + value * k, value=value)
                x += value * k
            groups.append(ChordGroup(index=i, start_angle=x0, end_angle=x, value=float(group_sums[i])))
            x += dx

        chords = [Chord(source=outgoing[key], target=incoming[key]) for key in sorted(outgoing)]
        return ChordLayoutResult(groups=groups, chords=chords)


def polar_point(radius: float, angle: float) -> Tuple[float, float]:
    return radius * math.sin(angle), radius * math.cos(angle)


def _arc_points(radius: float, start: float, end: float, resolution: float = 0.02) -> Tuple[np.ndarray, np.ndarray]:
    steps = max(2, int(math.ceil(abs(end - start) / resolution)) + 1)
    angles = np.linspace(start, end, steps)
    return radius * np.sin(angles), radius * np.cos(angles)


def _quadratic_through_centre(p0: Tuple[float, float], p2: Tuple[float, float], steps: int = 24) -> Tuple[np.ndarray, np.ndarray]:
    t = np.linspace(0, 1, steps)
    xs = (1 - t) ** 2 * p0[0] + t ** 2 * p2[0]
    ys = (1 - t) ** 2 * p0[1] + t ** 2 * p2[1]
    return xs, ys


def arc_polygon(group: ChordGroup, inner_radius: float, outer_radius: float) -> Tuple[List[float], List[float]]:
    """Annular sector between the two radii spanning the group's angles."""
    outer_x, outer_y = _arc_points(outer_radius, group.start_angle, group.end_angle)
    inner_x, inner_y = _arc_points(inner_radius, group.end_angle, group.start_angle)
    return np.concatenate([outer_x, inner_x]).tolist(), np.concatenate([outer_y, inner_y]).tolist()


def ribbon_polygon(chord: Chord, radius: float) -> Tuple[List[float], List[float]]:
    """Source arc, curve to the target arc, target arc, curve back to the start."""
    s, t = chord.source, chord.target
    parts_x, parts_y = [], []

    sx, sy = _arc_points(radius, s.start_angle, s.end_angle)
    parts_x.append(sx)
    parts_y.append(sy)
    if s.start_angle != t.start_angle or s.end_angle != t.end_angle:
        cx, cy = _quadratic_through_centre(polar_point(radius, s.end_angle), polar_point(radius, t.start_angle))
        parts_x.append(cx[1:])
        parts_y.append(cy[1:])
        tx, ty = _arc_points(radius, t.start_angle, t.end_angle)
        parts_x.append(tx[1:])
        parts_y.append(ty[1:])
        last = polar_point(radius, t.end_angle)
    else:
        last = polar_point(radius, s.end_angle)
    bx, by = _quadratic_through_centre(last, polar_point(radius, s.start_angle))
    parts_x.append(bx[1:])
    parts_y.append(by[1:])
    return np.concatenate(parts_x).tolist(), np.concatenate(parts_y).tolist()


def darker(color: str, k: float = 1.0) -> str:
    """Scale each RGB channel by ``0.7 ** k``."""
    value = color.lstrip("#")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    factor = 0.7 ** k
    return RGB(*(int(round(c * factor)) for c in (r, g, b))).to_hex().lower()
