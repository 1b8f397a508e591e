import sys
import random
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from marketsim import turn_service  # noqa: E402
from marketsim.catalog import catalog_to_dict, default_catalog  # noqa: E402
from marketsim.turn_service import (  # noqa: E402
    POSSIBLE_EVENTS,
    POSSIBLE_RIVAL_MOVES,
    MockGradesService,
    MockTurnSimulator,
    PayloadError,
    RemoteGradesService,
    RemoteTurnSimulator,
)

STATS = {"cash": 500, "loyalty": 10, "marketShare": 30}


def _payload(**kw):
    base = {"turn": 1, "maxTurns": 10, "stats": dict(STATS), "choice": "P1",
            "options": catalog_to_dict(default_catalog()), "history": []}
    base.update(kw)
    return base


class _FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.body


def test_mock_applies_fixed_stat_steps_and_random_tables():
    out = MockTurnSimulator(rng=random.Random(1)).simulate(_payload())
    assert out["stats"] == {"cash": 550, "loyalty": 15, "marketShare": 31}
    assert out["done"] is False
    assert out["event"] in POSSIBLE_EVENTS
    assert out["rivalMove"] in POSSIBLE_RIVAL_MOVES


def test_mock_same_seed_same_outcome():
    a = MockTurnSimulator(rng=random.Random(42)).simulate(_payload())
    b = MockTurnSimulator(rng=random.Random(42)).simulate(_payload())
    assert a == b


@pytest.mark.parametrize("turn,max_turns,done", [(9, 10, False), (10, 10, True), (11, 10, True), (0, None, False)])
def test_mock_done_flag(turn, max_turns, done):
    out = MockTurnSimulator(rng=random.Random(0)).simulate(_payload(turn=turn, maxTurns=max_turns))
    assert out["done"] is done


def test_mock_maps_free_text_choice():
    out = MockTurnSimulator(rng=random.Random(0)).simulate(_payload(choice="run some ads on instagram"))
    assert out["chosenOption"] == "O1"
    assert "O1" in out["explanation"]


def test_mock_code_choice_passes_through():
    out = MockTurnSimulator(rng=random.Random(0)).simulate(_payload(choice="R2"))
    assert out["chosenOption"] == "R2"
    assert out["explanation"] is None


def test_mock_skips_mapping_without_options():
    out = MockTurnSimulator(rng=random.Random(0)).simulate(_payload(options=None, choice="instagram ads"))
    assert out["chosenOption"] is None and out["explanation"] is None


def test_mock_latency_uses_injected_sleep():
    calls = []
    sim = MockTurnSimulator(rng=random.Random(0), latency=0.8, sleep=calls.append)
    sim.simulate(_payload())
    assert calls == [0.8]


@pytest.mark.parametrize("stats", [None, "x", {"cash": 1, "loyalty": 2}, {"cash": "1", "loyalty": 2, "marketShare": 3}])
def test_mock_rejects_bad_stats(stats):
    with pytest.raises(PayloadError):
        MockTurnSimulator().simulate(_payload(stats=stats))


def test_mock_grades_sample():
    calls = []
    report = MockGradesService(latency=0.6, sleep=calls.append).fetch()
    assert report == {"cash": 250, "loyalty": 45, "marketShare": 25, "overallGrade": "B+"}
    assert calls == [0.6]


def test_remote_simulate_posts_payload(monkeypatch):
    seen = {}

    def fake_post(url, json=None, timeout=None):
        seen["url"] = url
        seen["json"] = json
        return _FakeResponse({"stats": {"cash": 1, "loyalty": 2, "marketShare": 3}, "done": True})

    monkeypatch.setattr(turn_service.requests, "post", fake_post)
    out = RemoteTurnSimulator("http://sim.local/api/").simulate(_payload())
    assert seen["url"] == "http://sim.local/api/simulate"
    assert seen["json"]["choice"] == "P1"
    assert out["done"] is True


def test_remote_simulate_falls_back_to_current_stats(monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(turn_service.requests, "post", boom)
    out = RemoteTurnSimulator("http://sim.local/api").simulate(_payload())
    assert out == {"stats": STATS, "done": False}


def test_remote_simulate_http_error_falls_back(monkeypatch):
    monkeypatch.setattr(turn_service.requests, "post", lambda *a, **kw: _FakeResponse({}, status=500))
    out = RemoteTurnSimulator("http://sim.local/api").simulate(_payload())
    assert out["done"] is False and out["stats"] == STATS


def test_remote_grades(monkeypatch):
    monkeypatch.setattr(turn_service.requests, "get", lambda url, timeout=None: _FakeResponse({"overallGrade": "A"}))
    assert RemoteGradesService("http://sim.local/api").fetch() == {"overallGrade": "A"}

    def boom(*a, **kw):
        raise requests.Timeout("slow")

    monkeypatch.setattr(turn_service.requests, "get", boom)
    assert RemoteGradesService("http://sim.local/api").fetch() is None


@pytest.mark.parametrize("field,value", [("maxTurns", "10"), ("turn", "3"), ("turn", True), ("maxTurns", [10])])
def test_mock_rejects_non_numeric_turns(field, value):
    with pytest.raises(PayloadError, match=f"{field} must be a number"):
        MockTurnSimulator(rng=random.Random(0)).simulate(_payload(**{field: value}))


def test_remote_rejects_non_numeric_turns_before_sending(monkeypatch):
    def never(*a, **kw):
        raise AssertionError("should not be called")

    monkeypatch.setattr(turn_service.requests, "post", never)
    with pytest.raises(PayloadError):
        RemoteTurnSimulator("http://sim.local/api").simulate(_payload(maxTurns="10"))
