import sys
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from ruin_core.refresh import RefreshLoop
from ruin_renderer.models import DEFAULT_COLORS, RenderSettings
from ruin_telemetry.models import BatterySnapshot, BatteryStatus

SMALL = RenderSettings(canvas_width=16, canvas_height=12)


class FakeReader:
    def __init__(self, snapshots):
        self.snapshots = list(snapshots)
        self.polls = 0

    def read(self):
        snapshot = self.snapshots[self.polls]
        self.polls += 1
        return snapshot


class FakeSetter:
    def __init__(self, reader, results=None):
        self.reader = reader
        self.results = list(results or [])
        self.applied_at = []
        self.canvases = []

    def apply(self, canvas):
        self.applied_at.append(self.reader.polls - 1)
        self.canvases.append(canvas)
        return self.results.pop(0) if self.results else True


def make_loop(snapshots, results=None):
    reader = FakeReader(snapshots)
    setter = FakeSetter(reader, results)
    sleeps = []
    loop = RefreshLoop(
        reader=reader,
        setter=setter,
        colors=DEFAULT_COLORS,
        base=Image.new("RGBA", (4, 4), (143, 188, 187, 255)),
        settings=SMALL,
        interval_s=5.0,
        sleep=sleeps.append,
    )
    return loop, reader, setter, sleeps


S0 = BatterySnapshot(80, BatteryStatus.NOT_CHARGING)
S1 = BatterySnapshot(80, BatteryStatus.CHARGING)


class RefreshLoopTests(unittest.TestCase):
    def test_renders_once_per_transition(self):
        loop, _reader, setter, sleeps = make_loop([S0, S0, S1, S1, S1, S0])
        final = loop.run(max_iterations=6)
        self.assertEqual(setter.applied_at, [0, 2, 5])
        self.assertEqual(loop.renders, 3)
        self.assertEqual(final, S0)
        self.assertEqual(sleeps, [5.0] * 6)

    def test_first_poll_always_renders(self):
        loop, _reader, setter, _sleeps = make_loop([BatterySnapshot(1, BatteryStatus.NOT_CHARGING)])
        loop.run(max_iterations=1)
        self.assertEqual(len(setter.canvases), 1)
        self.assertEqual(setter.canvases[0].size, (16, 12))

    def test_initial_sentinel_reading_is_not_rendered(self):
        loop, _reader, setter, _sleeps = make_loop([BatterySnapshot.initial()])
        loop.run(max_iterations=1)
        self.assertEqual(setter.applied_at, [])

    def test_failed_apply_still_advances(self):
        loop, _reader, setter, _sleeps = make_loop([S0, S0, S1], results=[False, True])
        previous = BatterySnapshot.initial()
        previous = loop.step(previous)
        self.assertEqual(previous, S0)
        self.assertEqual(loop.failures, 1)
        previous = loop.step(previous)
        self.assertEqual(setter.applied_at, [0])
        loop.step(previous)
        self.assertEqual(setter.applied_at, [0, 2])
        self.assertEqual(loop.failures, 1)

    def test_capacity_change_alone_triggers_render(self):
        loop, _reader, setter, _sleeps = make_loop([S0, BatterySnapshot(79, BatteryStatus.NOT_CHARGING)])
        loop.run(max_iterations=2)
        self.assertEqual(setter.applied_at, [0, 1])


if __name__ == "__main__":
    unittest.main()
