from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Optional


def _as_float(v) -> Optional[float]:
    # bool is an int subclass but never a valid coordinate
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    try:
        f = float(v)
    except OverflowError:
        return None
    return f if math.isfinite(f) else None


def _as_int(v):
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and math.isfinite(v) and v.is_integer():
        return int(v)
    return None


@dataclass
class SequencePoint:
    point: List[float] = field(default_factory=list)
    duration: int = 0        # ms spent at the point
    time_to_target: int = 0  # ms to reach the point

    def copy(self) -> SequencePoint:
        return SequencePoint(list(self.point), self.duration, self.time_to_target)

    def from_json(self, obj: dict) -> bool:
        """Reads the point from a JSON object.

        Returns False if a field is missing or has the wrong type, in which
        case the point may have been partially updated.
        """
        if not isinstance(obj, dict):
            return False

        coords = obj.get("point")
        if not isinstance(coords, list):
            return False
        values = [_as_float(c) for c in coords]
        if None in values:
            return False
        self.point = values

        duration = _as_int(obj.get("duration"))
        if duration is None:
            return False
        self.duration = duration

        ttt = _as_int(obj.get("timeToTarget"))
        if ttt is None:
            return False
        self.time_to_target = ttt

        return True

    def to_json(self) -> dict:
        return {
            "point": list(self.point),
            "duration": self.duration,
            "timeToTarget": self.time_to_target,
        }
