# marketsim/turn_service.py
# Turn simulation + grades providers. Mock (in-memory) and remote (HTTP) implementations
# share one interface; which one runs is decided by the caller's settings.

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import requests

from .choice_resolver import resolve

logger = logging.getLogger("TurnService")

POSSIBLE_EVENTS = [
    "Heavy rain reduces foot traffic",
    "New competitor opens nearby",
    "Social media hype boosts sales",
    "Supply chain delay affects deliveries",
]

POSSIBLE_RIVAL_MOVES = [
    "Rival launches seasonal drink",
    "Rival offers discount on pastries",
    "Rival advertises on Instagram",
    "Rival expands pop-up locations",
]

STAT_KEYS = ("cash", "loyalty", "marketShare")


class PayloadError(ValueError):
    """Turn payload is missing required fields or has the wrong types."""


def _check_stats(payload: Mapping[str, Any]) -> Dict[str, int]:
    stats = payload.get("stats") if isinstance(payload, Mapping) else None
    if not isinstance(stats, Mapping):
        raise PayloadError("stats must be an object")
    out = {}
    for key in STAT_KEYS:
        val = stats.get(key)
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            raise PayloadError(f"stats.{key} must be a number")
        out[key] = val
    return out


def _check_turns(payload: Mapping[str, Any]) -> Tuple[Any, Any]:
    turn = payload.get("turn")
    max_turns = payload.get("maxTurns")
    for name, val in (("turn", turn), ("maxTurns", max_turns)):
        if val is not None and (isinstance(val, bool) or not isinstance(val, (int, float))):
            raise PayloadError(f"{name} must be a number")
    return turn or 0, max_turns


class TurnSimulator:
    def simulate(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class GradesService:
    def fetch(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class MockTurnSimulator(TurnSimulator):
    """
    Local stand-in for the simulation server.

    Stats move by a fixed step each turn, the event and rival move are drawn
    from small tables, and a free-text choice is mapped onto the catalog sent
    in ``payload["options"]``.
    """

    def __init__(self, rng: Optional[random.Random] = None, latency: float = 0.0,
                 sleep: Callable[[float], None] = time.sleep):
        self.rng = rng or random.Random()
        self.latency = latency
        self.sleep = sleep

    def simulate(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        stats = _check_stats(payload)
        turn, max_turns = _check_turns(payload)
        logger.debug("mock simulate turn=%s choice=%r", payload.get("turn"), payload.get("choice"))
        if self.latency > 0:
            self.sleep(self.latency)

        chosen_option = None
        explanation = None
        choice = payload.get("choice")
        options = payload.get("options")
        if options and isinstance(choice, str):
            res = resolve(choice, options)
            chosen_option, explanation = res.chosen_option, res.explanation

        return {
            "stats": {
                "cash": stats["cash"] + 50,
                "loyalty": stats["loyalty"] + 5,
                "marketShare": stats["marketShare"] + 1,
            },
            "done": max_turns is not None and turn >= max_turns,
            "event": self.rng.choice(POSSIBLE_EVENTS),
            "rivalMove": self.rng.choice(POSSIBLE_RIVAL_MOVES),
            "chosenOption": chosen_option,
            "explanation": explanation,
        }


class MockGradesService(GradesService):
    SAMPLE = {"cash": 250, "loyalty": 45, "marketShare": 25, "overallGrade": "B+"}

    def __init__(self, latency: float = 0.0, sleep: Callable[[float], None] = time.sleep):
        self.latency = latency
        self.sleep = sleep

    def fetch(self) -> Optional[Dict[str, Any]]:
        if self.latency > 0:
            self.sleep(self.latency)
        return dict(self.SAMPLE)


class RemoteTurnSimulator(TurnSimulator):
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def simulate(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        stats = _check_stats(payload)
        _check_turns(payload)
        url = f"{self.base_url}/simulate"
        logger.debug("remote simulate turn=%s -> %s", payload.get("turn"), url)
        try:
            r = requests.post(url, json=dict(payload), timeout=(3, max(4, self.timeout)))
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Simulation failed: %s", e)
            # keep current stats so the game can carry on
            return {"stats": stats, "done": False}


class RemoteGradesService(GradesService):
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch(self) -> Optional[Dict[str, Any]]:
        try:
            r = requests.get(f"{self.base_url}/grades", timeout=(3, max(4, self.timeout)))
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Fetching grades failed: %s", e)
            return None
