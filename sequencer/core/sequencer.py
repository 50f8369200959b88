from __future__ import annotations
import logging
from typing import Optional

from PySide6 import QtCore

from sequencer.core.config import DEFAULT_CONFIG
from sequencer.core.data_types import SequencePoint
from sequencer.core.sequence import Sequence


def _point_from_config(cfg: dict, key: str) -> Optional[SequencePoint]:
    if cfg.get(key) is None:
        return None
    p = SequencePoint()
    if p.from_json(cfg[key]):
        return p
    logging.warning(f"Bad '{key}' point in config, using default")
    p.from_json(DEFAULT_CONFIG[key])
    return p


class Sequencer(QtCore.QObject):
    """Owns the sequence being edited and swaps it on open/new."""

    sequenceChanged = QtCore.Signal()

    def __init__(self, config: Optional[dict] = None, parent=None):
        super().__init__(parent)
        self.config = dict(DEFAULT_CONFIG) if config is None else config
        self._sequence = self._seeded_sequence()

    @property
    def sequence(self) -> Sequence:
        return self._sequence

    def _seeded_sequence(self) -> Sequence:
        s = Sequence(
            int(self.config.get("point_dim", DEFAULT_CONFIG["point_dim"])),
            _point_from_config(self.config, "min"),
            _point_from_config(self.config, "max"),
            self,
        )
        seed = _point_from_config(self.config, "seed")
        if seed is not None:
            s.append()
            s.set_point(seed)
        return s

    def _replace(self, s: Sequence):
        old = self._sequence
        s.setParent(self)
        self._sequence = s
        old.setParent(None)
        self.sequenceChanged.emit()

    def new_sequence(self):
        self._replace(self._seeded_sequence())

    def open_file(self, filename: str) -> bool:
        s = Sequence.load(filename)
        if not s.is_valid():
            return False
        self._replace(s)
        self.config["last_file"] = str(filename)
        return True

    def save_file(self, filename: str) -> bool:
        if not self._sequence.save(filename):
            return False
        self.config["last_file"] = str(filename)
        return True
