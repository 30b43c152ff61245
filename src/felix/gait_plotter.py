# gait_plotter.py
#
# Foot path viewer for one compiled stride cycle
# READ-ONLY diagnostics
# No hardware, no timing

import argparse

from felix.config import default_config, load_config
from felix.layer2.legs import LEG_ORDER, LegRegistry
from felix.layer3.leg_ik import leg_position
from felix.layer6.gait_generator import GaitCompiler
from felix.log_adapter import write_cycle_csv


class _NoServo:
    def __init__(self, pin):
        self.pin = pin

    def set_angle(self, degrees):
        raise RuntimeError("gait plotter never drives servos")


def cycle_paths(config, gait="forward"):
    """
    Per leg: (commanded points, FK of the solved angles) over one cycle.
    """
    registry = LegRegistry.from_config(config, _NoServo)
    frames = GaitCompiler(registry, config).compile_cycle(config.gait(gait))

    paths = {}
    for i, leg_id in enumerate(LEG_ORDER):
        commanded = [f.points[i] for f in frames]
        solved = [leg_position(registry, config.geometry, leg_id, f.angles[i]) for f in frames]
        paths[leg_id] = (commanded, solved)
    return frames, paths


def plot_cycle(config, gait="forward", show=True):
    import matplotlib.pyplot as plt

    frames, paths = cycle_paths(config, gait)

    fig, axes = plt.subplots(2, 2, figsize=(9, 7), sharex=True, sharey=True)
    fig.suptitle(f"'{gait}' foot paths ({len(frames)} frames)")

    for ax, leg_id in zip(axes.flat, LEG_ORDER):
        commanded, solved = paths[leg_id]
        ax.plot([p.x for p in commanded], [p.y for p in commanded], "o-", label="commanded")
        ax.plot([p.x for p in solved], [p.y for p in solved], "x--", alpha=0.6, label="IK -> FK")
        ax.set_title(leg_id.value)
        ax.set_xlabel("x (fore-aft)")
        ax.set_ylabel("y (hip to foot)")
        ax.grid()

    axes.flat[0].invert_yaxis()  # y shared: foot further down is lower
    axes.flat[0].legend()
    fig.tight_layout()
    if show:
        plt.show()
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(prog="felix-plot", description="Plot or export one stride cycle")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--gait", default="forward")
    parser.add_argument("--csv", help="write the compiled frames to this CSV instead of plotting")
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else default_config()
    if args.csv:
        frames, _ = cycle_paths(config, args.gait)
        write_cycle_csv(frames, args.csv)
    else:
        plot_cycle(config, args.gait)
    return 0


if __name__ == "__main__":
    main()
