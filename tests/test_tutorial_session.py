# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import unittest
from typing import Dict, List, Optional, Tuple

from caloguide.tutorial.gate import PersistenceGate
from caloguide.tutorial.geometry import Viewport
from caloguide.tutorial.measure import TargetMeasurer
from caloguide.tutorial.models import Screen, TutorialFlags
from caloguide.tutorial.recipes import Bubble, Copy, DirectStep, StepOptions
from caloguide.tutorial.scroll import ScrollCoordinator
from caloguide.tutorial.session import ScreenHost, SessionState, TutorialSession
from caloguide.tutorial.steps import StepBuilder
from caloguide.tutorial.strings import catalog_translator

from tests.fakes import FakeScrollView, FakeTarget, GatedTarget, MemoryFlagStore, ScrolledTarget

NAMES = ("one", "two", "three")
COPY = {f"t.{name}.{part}": f"{name} {part}" for name in NAMES for part in ("title", "content")}


def _steps(*names: str, **options: StepOptions) -> Dict[Screen, tuple]:
    return {
        Screen.HOME: tuple(
            DirectStep(
                target=name,
                copy=Copy.step(f"t.{name}"),
                bubble=Bubble.above(100),
                options=options.get(name, StepOptions()),
            )
            for name in names
        )
    }


def _targets(*names: str) -> Dict[str, FakeTarget]:
    return {name: FakeTarget((10, 50 * (i + 1), 100, 40)) for i, name in enumerate(names)}


def _session(
    store: MemoryFlagStore, host: ScreenHost, tables=None, translate=None, mode_settle_delay=0
) -> TutorialSession:
    measurer = TargetMeasurer(top_inset=0, max_retries=0, retry_delay=0)
    builder = StepBuilder(
        measurer,
        translate or catalog_translator(COPY),
        viewport=Viewport(),
        settle_delay=0,
        tables=tables,
    )
    return TutorialSession(host, PersistenceGate(store, "u1"), builder, mode_settle_delay=mode_settle_delay)


class TestTutorialSession(unittest.IsolatedAsyncioTestCase):
    async def test_completed_screen_never_starts(self) -> None:
        store = MemoryFlagStore({"u1": TutorialFlags(home_done=True)})
        session = _session(store, ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))

        self.assertFalse(await session.start())
        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(store.writes, [])

    async def test_walks_steps_then_records_completion(self) -> None:
        completed: List[Screen] = []
        store = MemoryFlagStore()
        host = ScreenHost(Screen.HOME, _targets(*NAMES), on_complete=completed.append)
        session = _session(store, host, _steps(*NAMES))

        self.assertTrue(await session.start())
        self.assertIs(session.state, SessionState.ACTIVE)
        seen = [session.cursor]
        while session.state is SessionState.ACTIVE:
            await session.advance()
            seen.append(session.cursor)

        self.assertEqual(seen, [0, 1, 2, 0])
        self.assertEqual(store.writes, [{"home_done": True}])
        self.assertEqual(completed, [Screen.HOME])
        self.assertFalse(await session.on_focus())

    async def test_last_step_is_flagged(self) -> None:
        session = _session(MemoryFlagStore(), ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))
        await session.start()
        self.assertFalse(session.is_last_step)
        await session.advance()
        await session.advance()
        self.assertTrue(session.is_last_step)
        self.assertEqual(session.current_step.title, "three title")

    async def test_skip_finishes_in_one_call(self) -> None:
        store = MemoryFlagStore()
        session = _session(store, ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))
        await session.start()

        await session.skip()

        self.assertIs(session.state, SessionState.IDLE)
        self.assertIsNone(session.current_step)
        self.assertEqual(store.writes, [{"home_done": True}])

    async def test_concurrent_starts_run_one_tour(self) -> None:
        store = MemoryFlagStore()
        session = _session(store, ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))

        results = await asyncio.gather(session.start(), session.start())

        self.assertEqual(sorted(results), [False, True])
        self.assertEqual(store.reads, 1)

    async def test_mode_switches_before_cursor_moves(self) -> None:
        calls: List[Tuple[Optional[str], int]] = []
        store = MemoryFlagStore()
        host = ScreenHost(Screen.HOME, _targets("one", "two"))
        tables = _steps("one", "two", one=StepOptions(require_mode="barcode", switch_mode_to="photo"))
        session = _session(store, host, tables)
        host.set_mode = lambda mode: calls.append((mode, session.cursor))

        await session.start()
        self.assertIsNotNone(session.visible_step("barcode"))
        self.assertIsNone(session.visible_step("photo"))

        await session.advance()

        self.assertEqual(calls, [("photo", 0)])
        self.assertEqual(session.cursor, 1)

    async def test_async_mode_setter_is_awaited(self) -> None:
        calls: List[Optional[str]] = []

        async def set_mode(mode: Optional[str]) -> None:
            await asyncio.sleep(0)
            calls.append(mode)

        host = ScreenHost(Screen.HOME, _targets("one"), set_mode=set_mode)
        tables = _steps("one", one=StepOptions(switch_mode_to="photo"))
        store = MemoryFlagStore()
        session = _session(store, host, tables)
        await session.start()

        await session.advance()

        self.assertEqual(calls, ["photo"])
        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(store.writes, [{"home_done": True}])

    async def test_scrolls_then_remeasures_before_showing(self) -> None:
        view = FakeScrollView()
        targets = {
            "caloriesCard": FakeTarget((20, 100, 170, 120)),
            "macroCards": FakeTarget((20, 100, 352, 252)),
            "mealsList": ScrolledTarget(view, (20, 900, 350, 300)),
            "scannerButton": FakeTarget((150, 760, 90, 60)),
        }
        host = ScreenHost(Screen.HOME, targets, scroller=ScrollCoordinator(view, settle_delay=0))
        session = _session(MemoryFlagStore(), host, translate=catalog_translator())

        self.assertTrue(await session.start())
        self.assertEqual(len(session.steps), 4)
        self.assertEqual(session.steps[2].target_area.top, 900)

        await session.advance()
        self.assertEqual(view.calls, [])
        await session.advance()

        self.assertEqual(view.calls, [700.0])
        self.assertEqual(session.cursor, 2)
        self.assertEqual(session.steps[2].target_area.top, 200)
        # The meals bubble has a fixed top and stays put.
        self.assertEqual(session.steps[2].bubble.top, 160)
        self.assertEqual(targets["mealsList"].calls, 2)

    async def test_anchored_bubble_follows_remeasured_target(self) -> None:
        view = FakeScrollView()
        targets = {
            "statsGrid": FakeTarget((20, 60, 350, 80)),
            "editButton": FakeTarget((300, 20, 60, 30)),
            # Too close to the top to scroll, so it never reaches its pinned row.
            "goalsButton": ScrolledTarget(view, (20, 150, 350, 70)),
        }
        store = MemoryFlagStore({"u1": TutorialFlags(home_done=True, scanner_done=True)})
        host = ScreenHost(Screen.PROFILE, targets, scroller=ScrollCoordinator(view, settle_delay=0))
        session = _session(store, host, translate=catalog_translator())

        self.assertTrue(await session.start())
        goals = session.steps[2]
        self.assertEqual((goals.target_area.top, goals.bubble.top), (200, 290))

        await session.advance()
        await session.advance()

        self.assertEqual(view.calls, [0.0])
        goals = session.steps[2]
        self.assertEqual(goals.target_area.top, 150)
        self.assertEqual(goals.bubble.top, 240)
        self.assertEqual(goals.arrow.offset, 160)

    async def test_blur_while_building_discards_the_tour(self) -> None:
        gated = GatedTarget((10, 50, 100, 40))
        store = MemoryFlagStore()
        session = _session(store, ScreenHost(Screen.HOME, {"one": gated}), _steps("one"))

        task = asyncio.ensure_future(session.start())
        for _ in range(200):
            if session.state is SessionState.BUILDING and gated.calls:
                break
            await asyncio.sleep(0.01)
        self.assertIs(session.state, SessionState.BUILDING)

        session.on_blur(Screen.HOME)

        self.assertIs(session.state, SessionState.IDLE)
        self.assertFalse(await task)
        self.assertIsNone(session.current_step)
        self.assertEqual(store.writes, [])

        reads = store.reads
        gated.release.set()
        self.assertTrue(await session.on_focus())
        self.assertEqual(store.reads, reads + 1)
        self.assertIs(session.state, SessionState.ACTIVE)

    async def test_skip_during_mode_settle_finishes_once(self) -> None:
        modes: List[Optional[str]] = []
        store = MemoryFlagStore()
        host = ScreenHost(Screen.HOME, _targets("one", "two"), set_mode=modes.append)
        tables = _steps("one", "two", one=StepOptions(switch_mode_to="photo"))
        session = _session(store, host, tables, mode_settle_delay=30)
        await session.start()

        advancing = asyncio.ensure_future(session.advance())
        while not modes:
            await asyncio.sleep(0)
        await session.skip()
        await asyncio.wait_for(advancing, timeout=1)

        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(session.cursor, 0)
        self.assertEqual(store.writes, [{"home_done": True}])

    async def test_blur_of_another_screen_is_ignored(self) -> None:
        session = _session(MemoryFlagStore(), ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))
        await session.start()
        session.on_blur(Screen.PROFILE)
        self.assertIs(session.state, SessionState.ACTIVE)

    async def test_cancel_records_nothing(self) -> None:
        store = MemoryFlagStore()
        session = _session(store, ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))
        await session.start()
        await session.advance()

        session.cancel()

        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(session.cursor, 0)
        self.assertEqual(store.writes, [])

    async def test_nothing_measurable_returns_to_idle(self) -> None:
        store = MemoryFlagStore()
        session = _session(store, ScreenHost(Screen.HOME, {}), _steps(*NAMES))

        self.assertFalse(await session.start())
        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(store.writes, [])

    async def test_advance_outside_active_is_ignored(self) -> None:
        session = _session(MemoryFlagStore(), ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))
        await session.advance()
        await session.skip()
        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(session.cursor, 0)

    async def test_unsaved_completion_offers_tour_again(self) -> None:
        store = MemoryFlagStore()
        session = _session(store, ScreenHost(Screen.HOME, _targets(*NAMES)), _steps(*NAMES))
        await session.start()
        store.fail_writes = True

        with self.assertLogs("caloguide.tutorial.session", level="WARNING"):
            await session.skip()

        self.assertIs(session.state, SessionState.IDLE)
        store.fail_writes = False
        self.assertTrue(await session.on_focus())

    async def test_failing_completion_callback_is_contained(self) -> None:
        def explode(screen: Screen) -> None:
            raise RuntimeError("navigation failed")

        store = MemoryFlagStore()
        host = ScreenHost(Screen.HOME, _targets("one"), on_complete=explode)
        session = _session(store, host, _steps("one"))
        await session.start()

        with self.assertLogs("caloguide.tutorial.session", level="ERROR"):
            await session.advance()

        self.assertIs(session.state, SessionState.IDLE)
        self.assertEqual(store.writes, [{"home_done": True}])


if __name__ == "__main__":
    unittest.main()
