# main.py: headless sequencer session (no GUI)

from __future__ import annotations
import sys
import logging

from PySide6 import QtCore

from sequencer.core.config import CONFIG_FILE, load_config, save_config
from sequencer.core.sequencer import Sequencer


def log_sequence(seq):
    logging.info(f"Sequence: {len(seq)} points, dim {seq.point_dim}, current {seq.cur_point}")
    logging.info(f"Bounds: min={seq.min().to_json()} max={seq.max().to_json()}")
    for i, p in enumerate(seq):
        logging.info(f"  #{i}: {p.point} dur={p.duration} ttt={p.time_to_target}")


def main(argv) -> int:
    app = QtCore.QCoreApplication(argv)
    app.setApplicationName("Sequencer")

    config = load_config(CONFIG_FILE)
    sequencer = Sequencer(config)

    src = argv[1] if len(argv) > 1 else config.get("last_file", "")
    if src and not sequencer.open_file(src):
        logging.error(f"Could not open {src}")
        return 1

    log_sequence(sequencer.sequence)

    if len(argv) > 2:
        if not sequencer.save_file(argv[2]):
            return 1
        save_config(config, CONFIG_FILE)
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.FileHandler("sequencerlog.txt", mode="a"), logging.StreamHandler()],
    )
    logging.info("=== Sequencer Started ===")
    sys.exit(main(sys.argv))
