import argparse
import logging
import select
import sys
import time

from felix.config import default_config, load_config
from felix.controller import Felix
from felix.hardware.i2c_bus import close_i2c_bus
from felix.hardware.pca9685 import PCA9685Servo
from felix.layer8.task_slot import TaskSlot, make_scheduler

log = logging.getLogger(__name__)

HELP = """
--- FELIX ---
f            → walk forward (resumes if paused)
p | <space>  → pause / resume
x            → stop
s [height]   → stand
c [leg]      → calibrate all legs / one leg
pose LEG N   → leg to pose code N (1..4)
pos LEG X Y  → leg to point (X, Y)
home LEG     → leg to home position
status       → playback state
q            → quit
legs: FR FL BR BL
"""


class LoggingServo:
    """Stand-in actuator for --dry-run: logs instead of driving the bus."""

    def __init__(self, pin: int):
        self.pin = pin
        self.angle = None

    def set_angle(self, degrees: float):
        self.angle = degrees
        log.debug("[DRY] pin %d -> %.1f°", self.pin, degrees)


def run_command(felix: Felix, line: str) -> bool:
    """Run one shell line; False means quit."""
    # a bare space is the pause key
    words = line.split() or (["p"] if line else [])
    if not words:
        return True

    cmd, args = words[0].lower(), words[1:]
    try:
        if cmd in ("q", "quit", "exit"):
            return False
        elif cmd in ("f", "forward"):
            print(felix.forward())
        elif cmd in ("p", "pause"):
            print(felix.pause())
        elif cmd in ("x", "stop"):
            print(felix.stop())
        elif cmd in ("s", "stand"):
            print(felix.stand(float(args[0]) if args else None))
        elif cmd in ("c", "calibrate"):
            print(felix.calibrate_leg(args[0]) if args else felix.calibrate())
        elif cmd == "pose":
            print(felix.pose_leg(args[0], int(args[1])))
        elif cmd == "pos":
            print(felix.position_leg(args[0], (float(args[1]), float(args[2]))))
        elif cmd == "home":
            print(felix.home_leg(args[0]))
        elif cmd == "status":
            print(felix.status())
        elif cmd in ("h", "help", "?"):
            print(HELP)
        else:
            print(f"unknown command: {cmd}")
    except IndexError:
        print(f"error: {cmd}: missing argument")
    except (LookupError, ValueError) as e:
        leg = f" {args[0]}" if args else ""
        # KeyError's str() is the repr of its key
        message = e.args[0] if isinstance(e, LookupError) and e.args else e
        print(f"error: {cmd}{leg}: {message}")
    return True


def loop(felix: Felix, scheduler, stdin=sys.stdin):
    """
    Single-threaded shell: run due frames, then wait for input until
    the next frame is due.
    """
    while True:
        deadline = scheduler.run(blocking=False)
        timeout = None if deadline is None else max(0.0, deadline)

        ready, _, _ = select.select([stdin], [], [], timeout)
        if not ready:
            continue

        line = stdin.readline()
        if line == "":
            return  # EOF
        if not run_command(felix, line.rstrip("\n")):
            return


def build_parser():
    parser = argparse.ArgumentParser(prog="felix", description="Felix quadruped shell")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--dry-run", action="store_true", help="log servo commands instead of driving the PCA9685")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    config = load_config(args.config) if args.config else default_config()
    scheduler = make_scheduler(time.monotonic, time.sleep)
    felix = Felix(
        config,
        actuator_factory=LoggingServo if args.dry_run else PCA9685Servo,
        slot=TaskSlot(scheduler),
    )

    print(HELP)
    print(felix.stand())
    try:
        loop(felix, scheduler)
    except KeyboardInterrupt:
        print("\n[FELIX] Stopped cleanly")
    finally:
        felix.stop()
        if not args.dry_run:
            close_i2c_bus()
    return 0


if __name__ == "__main__":
    sys.exit(main())
