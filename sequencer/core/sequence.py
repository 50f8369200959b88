from __future__ import annotations
import json
import logging
from typing import List, Optional

import numpy as np
from PySide6 import QtCore

from sequencer.core.data_types import SequencePoint


def _clamp(v, lo, hi):
    return min(hi, max(lo, v))


def _half(n: int) -> int:
    # integer halving, truncated toward zero
    q = abs(n) // 2
    return q if n >= 0 else -q


class Sequence(QtCore.QObject):
    """Ordered list of waypoints kept inside per-field [min, max] bounds.

    A Sequence built with point_dim == 0 (the default) is invalid: every
    mutator is a silent no-op on it. Loading a malformed file returns such an
    inert sequence instead of raising.
    """

    numPointsChanged      = QtCore.Signal()
    curPointChanged       = QtCore.Signal()
    curPointValuesChanged = QtCore.Signal()   # cursor index same, content changed
    pointValuesChanged    = QtCore.Signal(int)
    isModifiedChanged     = QtCore.Signal()

    def __init__(self, point_dim: int = 0, min_vals: Optional[SequencePoint] = None,
                 max_vals: Optional[SequencePoint] = None, parent=None):
        super().__init__(parent)
        self._point_dim = max(0, int(point_dim))
        self._min = self.validate_point(min_vals or SequencePoint(), skip_limits=True)
        self._max = self.validate_point(max_vals or SequencePoint(), skip_limits=True)
        self._sequence: List[SequencePoint] = []
        self._cur_point: Optional[int] = None
        self._is_modified = False

    # ---------- state ----------
    @property
    def point_dim(self) -> int:
        return self._point_dim

    def is_valid(self) -> bool:
        return self._point_dim > 0

    @property
    def is_modified(self) -> bool:
        return self._is_modified

    @property
    def cur_point(self) -> Optional[int]:
        return self._cur_point

    @property
    def num_points(self) -> int:
        return len(self._sequence)

    def __len__(self):
        return len(self._sequence)

    def __iter__(self):
        return (p.copy() for p in self._sequence)

    # ---------- validation ----------
    def validate_point(self, p: SequencePoint, skip_limits: bool = False) -> SequencePoint:
        """Returns a copy of p resized to point_dim and, unless skip_limits, clamped into bounds."""
        coords = list(p.point[:self._point_dim])
        coords += [0.0] * (self._point_dim - len(coords))

        if skip_limits:
            return SequencePoint(coords, p.duration, p.time_to_target)

        if coords:
            a = np.asarray(coords, dtype=float)
            lo = np.asarray(self._min.point, dtype=float)
            # NaN goes to min, same as _clamp
            coords = np.where(np.isnan(a), lo, np.clip(a, lo, self._max.point)).tolist()
        return SequencePoint(
            coords,
            int(_clamp(p.duration, self._min.duration, self._max.duration)),
            int(_clamp(p.time_to_target, self._min.time_to_target, self._max.time_to_target)),
        )

    def default_sequence_point(self) -> SequencePoint:
        mid = (np.asarray(self._min.point, dtype=float) + np.asarray(self._max.point, dtype=float)) / 2.0
        return SequencePoint(
            mid.tolist(),
            _half(self._min.duration + self._max.duration),
            _half(self._min.time_to_target + self._max.time_to_target),
        )

    # ---------- cursor & list ----------
    def set_cur_point(self, p: int):
        if not self._sequence:
            return

        p = _clamp(p, 0, len(self._sequence) - 1)
        if p != self._cur_point:
            self._cur_point = p
            self.curPointChanged.emit()

    def insert_after_current(self):
        if not self.is_valid():
            return

        if self._cur_point is None:
            self._sequence.append(self.validate_point(self.default_sequence_point()))
            self._cur_point = 0
        else:
            self._sequence.insert(self._cur_point + 1, self.validate_point(self._sequence[self._cur_point]))
            self._cur_point += 1
        self.numPointsChanged.emit()
        self.curPointChanged.emit()

        self._sequence_modified()

    def insert_before_current(self):
        if not self.is_valid():
            return

        if self._cur_point is None:
            self._sequence.append(self.validate_point(self.default_sequence_point()))
            self._cur_point = 0
            self.curPointChanged.emit()
        else:
            self._sequence.insert(self._cur_point, self.validate_point(self._sequence[self._cur_point]))
        self.numPointsChanged.emit()

        # The index is the same but the point at it is a new one
        self.curPointValuesChanged.emit()

        self._sequence_modified()

    def append(self):
        if not self.is_valid():
            return

        p = self.default_sequence_point() if self._cur_point is None else self._sequence[self._cur_point]
        self._sequence.append(self.validate_point(p))
        self.numPointsChanged.emit()

        self._cur_point = len(self._sequence) - 1
        self.curPointChanged.emit()

        self._sequence_modified()

    def remove_current(self):
        if not self.is_valid() or self._cur_point is None:
            return

        del self._sequence[self._cur_point]
        self.numPointsChanged.emit()

        if self._cur_point >= len(self._sequence):
            self._cur_point = len(self._sequence) - 1 if self._sequence else None
            self.curPointChanged.emit()
        else:
            self.curPointValuesChanged.emit()

        self._sequence_modified()

    def clear(self):
        if not self.is_valid():
            return

        if self._sequence:
            self._sequence.clear()
            self.numPointsChanged.emit()

            self._cur_point = None
            self.curPointChanged.emit()

        # Marked even when there was nothing to clear
        self._sequence_modified()

    # ---------- bounds ----------
    def min(self) -> SequencePoint:
        return self._min.copy()

    def min_point_coordinate(self, c: int) -> float:
        return self._min.point[c]

    def min_point_duration(self) -> int:
        return self._min.duration

    def min_point_time_to_target(self) -> int:
        return self._min.time_to_target

    def max(self) -> SequencePoint:
        return self._max.copy()

    def max_point_coordinate(self, c: int) -> float:
        return self._max.point[c]

    def max_point_duration(self) -> int:
        return self._max.duration

    def max_point_time_to_target(self) -> int:
        return self._max.time_to_target

    # ---------- points ----------
    def __getitem__(self, pos: int) -> SequencePoint:
        return self.point_at(pos)

    def point_at(self, pos: int) -> SequencePoint:
        return self._sequence[self._check_pos(pos)].copy()

    def point(self) -> Optional[SequencePoint]:
        if self._cur_point is None:
            return None
        return self._sequence[self._cur_point].copy()

    def point_coordinate(self, c: int, pos: Optional[int] = None) -> float:
        if pos is None:
            if self._cur_point is None:
                return 0.0
            pos = self._cur_point
        return self._sequence[self._check_pos(pos)].point[c]

    def point_duration(self, pos: Optional[int] = None) -> int:
        if pos is None:
            if self._cur_point is None:
                return 0
            pos = self._cur_point
        return self._sequence[self._check_pos(pos)].duration

    def point_time_to_target(self, pos: Optional[int] = None) -> int:
        if pos is None:
            if self._cur_point is None:
                return 0
            pos = self._cur_point
        return self._sequence[self._check_pos(pos)].time_to_target

    def set_point(self, p: SequencePoint, pos: Optional[int] = None):
        """Replaces the point at pos (the current point if pos is None)."""
        pos = self._target(pos)
        if pos is None:
            return

        old = self._sequence[pos]
        new = self.validate_point(p)
        self._sequence[pos] = new
        if old == new:
            return
        self._point_changed(pos)

    def set_point_coordinate(self, c: int, v: float, pos: Optional[int] = None):
        pos = self._target(pos)
        if pos is None:
            return

        coords = self._sequence[pos].point
        old = coords[c]
        coords[c] = float(_clamp(v, self._min.point[c], self._max.point[c]))
        if old == coords[c]:
            return
        self._point_changed(pos)

    def set_duration(self, d: int, pos: Optional[int] = None):
        pos = self._target(pos)
        if pos is None:
            return

        sp = self._sequence[pos]
        old = sp.duration
        sp.duration = _clamp(int(d), self._min.duration, self._max.duration)
        if old == sp.duration:
            return
        self._point_changed(pos)

    def set_time_to_target(self, t: int, pos: Optional[int] = None):
        pos = self._target(pos)
        if pos is None:
            return

        sp = self._sequence[pos]
        old = sp.time_to_target
        sp.time_to_target = _clamp(int(t), self._min.time_to_target, self._max.time_to_target)
        if old == sp.time_to_target:
            return
        self._point_changed(pos)

    # ---------- persistence ----------
    @classmethod
    def load(cls, filename) -> Sequence:
        try:
            with open(filename, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            logging.warning(f"Cannot open sequence file {filename}: {e}")
            return cls()
        except ValueError as e:
            logging.warning(f"Invalid JSON in {filename}: {e}")
            return cls()

        s = cls.from_json(data)
        if s.is_valid():
            logging.info(f"Loaded sequence from {filename} ({len(s)} points, dim {s.point_dim})")
        else:
            logging.warning(f"Malformed sequence file {filename}")
        return s

    @classmethod
    def from_json(cls, data) -> Sequence:
        # [min, max, point, point, ...]
        if not isinstance(data, list):
            return cls()

        min_point = SequencePoint()
        max_point = SequencePoint()
        points: List[SequencePoint] = []
        dim = None
        for index, obj in enumerate(data):
            sp = SequencePoint()
            if not isinstance(obj, dict) or not sp.from_json(obj):
                return cls()
            if dim is not None and dim != len(sp.point):
                return cls()
            dim = len(sp.point)

            if index == 0:
                min_point = sp
            elif index == 1:
                max_point = sp
            else:
                points.append(sp)

        if dim is None:
            return cls()

        s = cls(dim, min_point, max_point)
        s._sequence = [s.validate_point(sp) for sp in points]
        if s._sequence:
            s._cur_point = 0
        return s

    def to_json(self) -> Optional[list]:
        """Serialized form of the sequence, None if invalid. Does not touch is_modified."""
        if not self.is_valid():
            return None
        return [self._min.to_json(), self._max.to_json()] + [sp.to_json() for sp in self._sequence]

    def mark_saved(self):
        if self._is_modified:
            self._is_modified = False
            self.isModifiedChanged.emit()

    def save_json(self) -> Optional[list]:
        doc = self.to_json()
        self.mark_saved()
        return doc

    def save(self, filename) -> bool:
        if not self.is_valid():
            return False

        doc = self.to_json()
        try:
            with open(filename, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
        except OSError as e:
            logging.error(f"Cannot save sequence to {filename}: {e}")
            return False

        self.mark_saved()
        logging.info(f"Sequence saved to {filename}")
        return True

    # ---------- helpers ----------
    def _check_pos(self, pos: int) -> int:
        # Negative indexes would silently wrap around
        if not 0 <= pos < len(self._sequence):
            raise IndexError(f"point index {pos} out of range (0..{len(self._sequence) - 1})")
        return pos

    def _target(self, pos: Optional[int]) -> Optional[int]:
        if not self.is_valid():
            return None
        if pos is None:
            return self._cur_point
        return self._check_pos(pos)

    def _point_changed(self, pos: int):
        self.pointValuesChanged.emit(pos)
        if pos == self._cur_point:
            self.curPointValuesChanged.emit()
        self._sequence_modified()

    def _sequence_modified(self):
        if not self._is_modified:
            self._is_modified = True
            self.isModifiedChanged.emit()
