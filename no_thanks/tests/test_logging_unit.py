"""Unit coverage for structured logging utilities and cancellation events."""

from __future__ import annotations

import io
import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Iterator

import pytest

import no_thanks
from no_thanks.base.cancellation import CancellationChain, CancellationContext
from no_thanks.base.errors import ConfigurationError
from no_thanks.base.grain_parts.finalize_quietly import finalize_quietly
from no_thanks.base.logging import (
    BASE_LOGGER_NAME,
    LogContext,
    apply_log_settings,
    configure_logger,
    get_logger,
    log_event,
)
from no_thanks.base.log_support import JsonFormatter
from no_thanks.base.promise import CancellablePromise
from no_thanks.config import get_settings, reset_settings_cache
from no_thanks.tests.helpers import delayed

PACKAGE_ROOT = Path(no_thanks.__file__).resolve().parents[1]


@pytest.fixture()
def captured() -> Iterator[io.StringIO]:
    """Swap the base logger's handlers for an in-memory JSON handler."""

    base_logger = get_logger()
    saved_handlers = base_logger.handlers[:]
    saved_level = base_logger.level
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    base_logger.handlers[:] = [handler]
    base_logger.setLevel(logging.DEBUG)
    yield stream
    base_logger.handlers[:] = saved_handlers
    base_logger.setLevel(saved_level)


def _events(stream: io.StringIO) -> list[dict]:
    return [json.loads(ln) for ln in stream.getvalue().splitlines() if ln]


def test_get_logger_prefixes_child_names():
    assert get_logger().name == BASE_LOGGER_NAME  # nosec B101 - asserts are appropriate in unit tests
    assert get_logger("grains").name == "no_thanks.grains"  # nosec B101 - asserts are appropriate in unit tests
    assert get_logger("no_thanks.x").name == "no_thanks.x"  # nosec B101 - asserts are appropriate in unit tests
    assert get_logger().propagate is False  # nosec B101 - asserts are appropriate in unit tests


def test_log_event_emits_single_json_line(captured):
    logger = get_logger("test.events")
    log_event(logger, "cancel.request", LogContext(chain_id="c1", depth=2), level=logging.INFO, skipped=None, steps=3)
    (payload,) = _events(captured)
    assert payload["event"] == "cancel.request"  # nosec B101 - asserts are fine in tests
    assert payload["chain_id"] == "c1" and payload["depth"] == 2  # nosec B101 - asserts are fine in tests
    assert payload["steps"] == 3 and "skipped" not in payload  # nosec B101 - asserts are fine in tests
    assert payload["level"] == "INFO" and payload["logger"] == "no_thanks.test.events"  # nosec B101 - asserts are fine in tests


def test_log_event_respects_level(captured):
    configure_logger(level="ERROR")
    log_event(get_logger("test.quiet"), "finalize.start")
    assert captured.getvalue() == ""  # nosec B101 - DEBUG suppressed


def test_json_formatter_hoists_json_message() -> None:
    """Ensure the formatter hoists JSON message keys without double escaping."""

    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="no_thanks.test.json",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=json.dumps({"chain_id": "abc", "event": "finalize.done"}),
        args=(),
        exc_info=None,
    )
    payload = json.loads(formatter.format(record))
    assert payload["chain_id"] == "abc"  # nosec B101 - validates hoisting
    assert "msg" not in payload  # nosec B101 - structured events suppress raw message noise


def test_json_formatter_keeps_plain_message() -> None:
    record = logging.LogRecord("no_thanks.t", logging.WARNING, __file__, 0, "plain %s", ("text",), None)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "plain text"  # nosec B101 - asserts are fine in tests


def test_configure_logger_attaches_and_removes_file_handler(tmp_path):
    target = tmp_path / "logs" / "no_thanks.log"
    logger = configure_logger(file_path=str(target), json_mode=True)
    try:
        logger.warning("to file")
        for h in logger.handlers:
            h.flush()
        assert target.exists()  # nosec B101 - asserts are fine in tests
        assert "to file" in target.read_text(encoding="utf-8")  # nosec B101 - asserts are fine in tests
    finally:
        configure_logger(file_path=None)
    assert all(  # nosec B101 - asserts are fine in tests
        not getattr(h, "baseFilename", "").endswith("no_thanks.log") for h in logger.handlers
    )


def test_finalizer_failure_is_logged_with_finalizer_code(captured):
    def fin(*_results):
        raise OSError("disk gone")

    ctx = CancellationContext(fin)
    ctx.cancel()
    with pytest.raises(OSError):
        ctx.finalize()
    events = {e["event"]: e for e in _events(captured)}
    assert events["finalize.error"]["error_code"] == "finalizer"  # nosec B101 - asserts are fine in tests
    assert events["finalize.error"]["failure_class"] == "OSError"  # nosec B101 - asserts are fine in tests


@pytest.mark.asyncio
async def test_cancel_emits_request_then_repeat(captured):
    p = CancellablePromise(delayed(1, 0))
    await p
    await p.cancel()
    await p.cancel()
    names = [e["event"] for e in _events(captured)]
    assert names[0] == "cancel.request"  # nosec B101 - asserts are fine in tests
    assert "finalize.start" in names and "finalize.done" in names  # nosec B101 - asserts are fine in tests
    assert names[-1] == "cancel.repeat"  # nosec B101 - asserts are fine in tests


def test_invalid_settings_env_does_not_break_logger_setup(monkeypatch):
    monkeypatch.setenv("NO_THANKS_FINE_GRAINED", "maybe")
    monkeypatch.setenv("NO_THANKS_LOG_LEVEL", "bogus")
    logger = get_logger("test.bad_env")
    assert logger.name == "no_thanks.test.bad_env"  # nosec B101 - asserts are fine in tests
    with pytest.raises(ConfigurationError):
        get_settings()


def test_import_succeeds_with_invalid_settings_env(tmp_path):
    env = dict(os.environ)
    env.update(NO_THANKS_FINE_GRAINED="maybe", NO_THANKS_LOG_LEVEL="bogus")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PACKAGE_ROOT), env.get("PYTHONPATH")]))
    proc = subprocess.run(
        [sys.executable, "-c", "import no_thanks; print(no_thanks.__version__)"],
        env=env,
        cwd=tmp_path,
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0, proc.stderr  # nosec B101 - asserts are fine in tests
    assert proc.stdout.strip() == no_thanks.__version__  # nosec B101 - asserts are fine in tests


def test_reloaded_settings_reach_the_logger(monkeypatch):
    base_logger = get_logger()
    saved_level = base_logger.level
    try:
        monkeypatch.setenv("NO_THANKS_LOG_LEVEL", "ERROR")
        reset_settings_cache()
        get_settings()
        assert base_logger.level == logging.ERROR  # nosec B101 - asserts are fine in tests
        monkeypatch.setenv("NO_THANKS_LOG_LEVEL", "DEBUG")
        reset_settings_cache()
        get_settings()
        assert base_logger.level == logging.DEBUG  # nosec B101 - asserts are fine in tests
    finally:
        monkeypatch.delenv("NO_THANKS_LOG_LEVEL", raising=False)
        apply_log_settings(level=saved_level)


def test_unobserved_finalizer_error_is_tagged_finalizer(captured):
    def fin(*_results):
        raise ValueError("late failure")

    chain = CancellationChain(fin)
    chain.cancel()
    finalize_quietly(chain)
    events = {e["event"]: e for e in _events(captured)}
    assert events["finalize.unobserved_error"]["error_code"] == "finalizer"  # nosec B101 - asserts are fine in tests
    assert events["finalize.unobserved_error"]["level"] == "ERROR"  # nosec B101 - asserts are fine in tests
