import sys

import pytest

from felix import gait_plotter
from felix.layer2.legs import LEG_ORDER


@pytest.fixture
def pyplot():
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    return plt


def test_cycle_paths_track_commanded_points(config):
    frames, paths = gait_plotter.cycle_paths(config)
    assert len(frames) == 16
    assert set(paths) == set(LEG_ORDER)

    for commanded, solved in paths.values():
        assert len(commanded) == len(solved) == 16
        for c, s in zip(commanded, solved):
            assert s.x == pytest.approx(c.x, abs=2)
            assert s.y == pytest.approx(c.y, abs=2)


def test_plot_cycle(config, pyplot):
    fig = gait_plotter.plot_cycle(config, show=False)
    assert len(fig.axes) == 4
    assert fig.axes[0].yaxis_inverted()
    pyplot.close(fig)


def test_csv_export_works_without_matplotlib(tmp_path, monkeypatch):
    # any matplotlib import now fails
    monkeypatch.setitem(sys.modules, "matplotlib", None)
    monkeypatch.setitem(sys.modules, "matplotlib.pyplot", None)

    path = tmp_path / "forward.csv"
    assert gait_plotter.main(["--csv", str(path)]) == 0
    assert len(path.read_text().splitlines()) == 17
