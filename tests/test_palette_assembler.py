# tests/test_palette_assembler.py
"""
assembler tests
===============

Does: Drive the retry loop with deterministic fake upstreams and check tiered
      acceptance, exhaustion accounting and fetch-failure handling.
"""

from __future__ import annotations

import asyncio
import importlib
import threading
import time
import types

import pytest
import requests

from harmony_palette.color.upstream import colormind_client as cm_impl
from harmony_palette.config import ServiceConfig
from harmony_palette.errors import UpstreamFetchError
from harmony_palette.palette import FailureReason, Palette, assemble_palette, evaluate_candidates

asm = importlib.import_module("harmony_palette.palette.assembler")

FOUR_LIGHT = [[0, 0, 0], [255, 255, 255], [250, 250, 250], [245, 245, 245], [240, 240, 240]]
ALL_SAME_LIGHT = [[255, 255, 255], [255, 255, 255]]


class FakeUpstream:
    """Async callable replaying canned palettes (last one repeats) or raising."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = 0

    async def __call__(self):
        reply = self.replies[min(self.calls, len(self.replies) - 1)]
        self.calls += 1
        if isinstance(reply, Exception):
            raise reply
        return reply


def run(coro):
    return asyncio.run(coro)


# ──────────────────────────────────────────────────────────────────────────────
# evaluate_candidates (single pass)
# ──────────────────────────────────────────────────────────────────────────────
def test_evaluate_four_color_tier():
    p = evaluate_candidates(FOUR_LIGHT)
    assert p == Palette((0, 0, 0), (255, 255, 255), (250, 250, 250), (245, 245, 245))


def test_evaluate_two_light_colors_gives_three_fields():
    p = evaluate_candidates([[0, 0, 0], [255, 255, 255], [30, 30, 30], [250, 250, 250]])
    assert p.to_dict() == {
        "mainColor": [0, 0, 0],
        "secondaryColor": [255, 255, 255],
        "accentColor1": [250, 250, 250],
    }


def test_evaluate_single_light_color_gives_main_and_secondary_only():
    p = evaluate_candidates([[0, 0, 0], [255, 255, 255], [30, 30, 30], [60, 20, 20]])
    assert p.to_dict() == {"mainColor": [0, 0, 0], "secondaryColor": [255, 255, 255]}


def test_evaluate_dedupes_before_selecting():
    p = evaluate_candidates([[0, 0, 0], [255, 255, 255], [255, 255, 255], [0, 0, 0]])
    assert p.to_dict() == {"mainColor": [0, 0, 0], "secondaryColor": [255, 255, 255]}


def test_evaluate_main_can_reappear_as_light_candidate():
    # main is the darker of two light colors and comes second in upstream order
    p = evaluate_candidates([[250, 250, 250], [200, 200, 200]])
    assert p.to_dict() == {"mainColor": [200, 200, 200], "secondaryColor": [250, 250, 250]}


def test_evaluate_main_first_light_candidate_is_rejected():
    assert evaluate_candidates([[200, 200, 200], [250, 250, 250]]) is None


def test_evaluate_no_light_colors_rejected():
    assert evaluate_candidates([[0, 0, 0], [20, 20, 20], [40, 10, 90]]) is None


# ──────────────────────────────────────────────────────────────────────────────
# assemble_palette (retry loop)
# ──────────────────────────────────────────────────────────────────────────────
def test_assemble_accepts_first_attempt():
    fake = FakeUpstream(FOUR_LIGHT)
    result = run(assemble_palette(fake))
    assert result.ok and result.attempts == 1 and fake.calls == 1
    assert result.palette.to_dict() == {
        "mainColor": [0, 0, 0],
        "secondaryColor": [255, 255, 255],
        "accentColor1": [250, 250, 250],
        "accentColor2": [245, 245, 245],
    }


def test_assemble_retries_until_acceptable():
    fake = FakeUpstream(ALL_SAME_LIGHT, [[0, 0, 0], [10, 10, 10]], FOUR_LIGHT)
    result = run(assemble_palette(fake))
    assert result.ok and result.attempts == 3 and fake.calls == 3


def test_assemble_exhausts_after_exactly_seven_fetches():
    fake = FakeUpstream(ALL_SAME_LIGHT)
    result = run(assemble_palette(fake))
    assert not result.ok
    assert result.reason is FailureReason.EXHAUSTED
    assert result.attempts == 7
    assert fake.calls == 7


def test_assemble_custom_budget():
    fake = FakeUpstream(ALL_SAME_LIGHT)
    result = run(assemble_palette(fake, max_attempts=2))
    assert result.reason is FailureReason.EXHAUSTED and fake.calls == 2


def test_assemble_rejects_zero_budget():
    with pytest.raises(ValueError):
        run(assemble_palette(FakeUpstream(FOUR_LIGHT), max_attempts=0))


def test_assemble_fetch_error_aborts_by_default():
    err = UpstreamFetchError("down", status_code=503)
    fake = FakeUpstream(ALL_SAME_LIGHT, err, FOUR_LIGHT)
    result = run(assemble_palette(fake))
    assert result.reason is FailureReason.UPSTREAM_ERROR
    assert result.error is err
    assert result.attempts == 2 and fake.calls == 2


def test_assemble_fetch_error_consumes_attempt_when_retry_enabled():
    fake = FakeUpstream(UpstreamFetchError("flaky"), FOUR_LIGHT)
    result = run(assemble_palette(fake, retry_on_fetch_error=True))
    assert result.ok and result.attempts == 2


def test_assemble_retry_enabled_all_failures_reports_upstream_error():
    fake = FakeUpstream(UpstreamFetchError("down"))
    result = run(assemble_palette(fake, retry_on_fetch_error=True))
    assert result.reason is FailureReason.UPSTREAM_ERROR
    assert fake.calls == 7


def test_assemble_retry_enabled_rejections_report_exhausted():
    fake = FakeUpstream(UpstreamFetchError("down"), ALL_SAME_LIGHT)
    result = run(assemble_palette(fake, retry_on_fetch_error=True, max_attempts=3))
    assert result.reason is FailureReason.EXHAUSTED


def test_assemble_timeout_is_a_fetch_failure():
    async def slow():
        await asyncio.sleep(5)
        return FOUR_LIGHT

    result = run(assemble_palette(slow, attempt_timeout=0.01))
    assert result.reason is FailureReason.UPSTREAM_ERROR
    assert "timed out" in str(result.error)


def test_assemble_empty_palette_is_a_fetch_failure():
    result = run(assemble_palette(FakeUpstream([])))
    assert result.reason is FailureReason.UPSTREAM_ERROR


@pytest.mark.parametrize(
    "reply",
    [
        FOUR_LIGHT,
        [[0, 0, 0], [255, 255, 255], [250, 250, 250]],
        [[0, 0, 0], [255, 255, 255]],
        [[250, 250, 250], [200, 200, 200], [210, 210, 210]],
    ],
)
def test_assembled_palettes_have_no_holes_and_no_duplicates(reply):
    palette = run(assemble_palette(FakeUpstream(reply))).unwrap()
    payload = palette.to_dict()
    order = ["mainColor", "secondaryColor", "accentColor1", "accentColor2"]
    present = [k in payload for k in order]
    assert present == sorted(present, reverse=True)
    hexes = {tuple(v) for v in payload.values()}
    assert len(hexes) == len(payload)


# ──────────────────────────────────────────────────────────────────────────────
# fetch_color_palette (config wiring)
# ──────────────────────────────────────────────────────────────────────────────
def test_fetch_color_palette_uses_config(monkeypatch):
    seen = {}

    class DummyClient:
        @classmethod
        def from_config(cls, config):
            seen["config"] = config
            return cls()

        async def afetch_colors(self):
            return FOUR_LIGHT

    monkeypatch.setattr(asm, "ColormindClient", DummyClient, raising=True)
    config = ServiceConfig(upstream_timeout=1.0)
    result = run(asm.fetch_color_palette(config))
    assert result.ok
    assert seen["config"] is config


def test_fetch_color_palette_timed_out_calls_never_overlap(monkeypatch):
    lock = threading.Lock()
    state = {"live": 0, "peak": 0, "calls": 0, "timeouts": []}

    def slow_post(url, headers, json, timeout):
        with lock:
            state["live"] += 1
            state["calls"] += 1
            state["peak"] = max(state["peak"], state["live"])
            state["timeouts"].append(timeout)
        try:
            # outlives the configured timeout, like a stalled upstream
            time.sleep(0.1)
            raise requests.exceptions.ReadTimeout("read timed out")
        finally:
            with lock:
                state["live"] -= 1

    monkeypatch.setattr(cm_impl, "_session", types.SimpleNamespace(post=slow_post))
    config = ServiceConfig(upstream_timeout=0.01, retry_on_fetch_error=True)
    result = run(asm.fetch_color_palette(config))

    assert result.reason is FailureReason.UPSTREAM_ERROR
    assert state["calls"] == 7
    assert state["peak"] == 1
    assert state["live"] == 0
    assert state["timeouts"] == [(0.01, 0.01)] * 7
