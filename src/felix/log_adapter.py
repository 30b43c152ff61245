"""
Compiled cycle -> frame CSV.

One row per frame: index, kind (stance / transition / loop), the gait
rows it came from, then per leg x, y, hip, knee.
"""

import csv
import logging

from felix.layer2.legs import LEG_ORDER
from felix.layer6.gait_generator import LoopFrame

log = logging.getLogger(__name__)


def fieldnames():
    fields = ["frame", "kind", "row", "next_row"]
    for leg in LEG_ORDER:
        fields += [f"{leg.value}_x", f"{leg.value}_y", f"{leg.value}_hip", f"{leg.value}_knee"]
    return fields


def frame_rows(frames):
    for i, frame in enumerate(frames):
        if isinstance(frame, LoopFrame):
            yield {"frame": i, "kind": "loop", "row": frame.count}
            continue

        row = {
            "frame": i,
            "kind": "transition" if frame.is_transition else "stance",
            "row": "".join(str(c) for c in frame.row),
            "next_row": "".join(str(c) for c in frame.next_row) if frame.next_row else "",
        }
        for leg, point, angles in zip(LEG_ORDER, frame.points, frame.angles):
            row[f"{leg.value}_x"] = round(point.x, 3)
            row[f"{leg.value}_y"] = round(point.y, 3)
            row[f"{leg.value}_hip"] = angles.hip
            row[f"{leg.value}_knee"] = angles.knee
        yield row


def write_cycle_csv(frames, path):
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames())
        writer.writeheader()
        count = 0
        for row in frame_rows(frames):
            writer.writerow(row)
            count += 1

    log.info("[OK] Wrote %s with %d frames", path, count)
    return count
