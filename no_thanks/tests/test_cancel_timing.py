"""Cancellation timing across a three-stage pipeline and both cancel modes.

Delays are small (10ms steps) and the bounds are deliberately loose so the
suite stays stable on slow CI machines.
"""
from __future__ import annotations

import asyncio
import time

import pytest

from no_thanks import cancellable, interruptible
from no_thanks.tests.helpers import Recorder, delayed, settle_for

STEP = 0.01


@pytest.mark.asyncio
async def test_pipeline_canceled_mid_stage_finalizes_with_finished_and_in_flight_results():
    fin = Recorder(result="cleaned")
    log = []
    p = cancellable(delayed("A", STEP, log), fin)
    q = p.then(lambda a: delayed("B", STEP, log)).then(lambda b: delayed("C", STEP, log))

    await asyncio.sleep(STEP * 1.5)
    start = time.monotonic()
    outcome = await asyncio.wait_for(q.cancel(), timeout=1)
    elapsed = time.monotonic() - start

    assert outcome == "cleaned"  # nosec B101 - pytest assert in tests
    assert fin.calls == [("A", "B")]  # nosec B101 - pytest assert in tests
    # Waited for B to settle, roughly half a step.
    assert 0.0 < elapsed < 0.5  # nosec B101 - pytest assert in tests
    await settle_for(STEP * 2)
    assert "start C" not in log  # nosec B101 - pytest assert in tests
    assert q.done() is False  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_default_cancel_waits_for_in_flight_root():
    fin = Recorder()
    p = cancellable(delayed("X", STEP * 2), fin)
    start = time.monotonic()
    result = p.cancel()
    assert result.done() is False  # nosec B101 - pytest assert in tests
    await asyncio.wait_for(result, timeout=1)
    assert time.monotonic() - start >= STEP  # nosec B101 - pytest assert in tests
    # The root result arrived after cancel and is not handed over.
    assert fin.calls == [()]  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_interruptible_cancel_finalizes_synchronously():
    fin = Recorder(result="now")
    p = interruptible(delayed("X", STEP * 2), fin)
    result = p.cancel()
    assert result.done() is True  # nosec B101 - pytest assert in tests
    assert fin.calls == [()]  # nosec B101 - pytest assert in tests
    assert await result == "now"  # nosec B101 - pytest assert in tests
    await settle_for(STEP * 3)
    # The late root result does not run the finalizer a second time.
    assert fin.count == 1  # nosec B101 - pytest assert in tests
    assert p.done() is False  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_interruptible_cancel_mid_pipeline_uses_results_so_far():
    fin = Recorder()
    p = interruptible(delayed("A", STEP), fin)
    q = p.then(lambda a: delayed("B", STEP))
    await asyncio.sleep(STEP * 1.5)
    await q.cancel()
    assert fin.calls == [("A",)]  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_fine_grained_task_collects_finished_and_in_flight_sub_units():
    fin = Recorder()
    log = []

    async def task(grain, label):
        first = await grain(delayed(1, STEP, log, f"{label}-1"))
        second = await grain(delayed(2, STEP, log, f"{label}-2"))
        third = await grain(delayed(3, STEP, log, f"{label}-3"))
        return first + second + third

    p = cancellable(task, fin)("job")
    await asyncio.sleep(STEP * 1.5)
    await asyncio.wait_for(p.cancel(), timeout=1)
    await settle_for(STEP * 2)
    assert fin.calls == [(1, 2)]  # nosec B101 - pytest assert in tests
    assert "start job-3" not in log  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_coarse_task_runs_to_completion_before_finalizing():
    fin = Recorder()
    log = []

    async def task(label):
        await delayed(1, STEP, log, f"{label}-1")
        await delayed(2, STEP, log, f"{label}-2")
        return "all"

    p = cancellable(task, fin, fine_grained=False)("job")
    await asyncio.sleep(STEP * 0.5)
    await asyncio.wait_for(p.cancel(), timeout=1)
    assert "done job-2" in log  # nosec B101 - pytest assert in tests
    assert fin.calls == [()]  # nosec B101 - pytest assert in tests
