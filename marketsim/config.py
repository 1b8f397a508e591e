# marketsim/config.py
# Environment -> Settings for the API runner and service selection.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

TRUTHY = {"1", "true", "yes", "y"}


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY


def _float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        raise RuntimeError(f"{name} must be a number")


def _int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer")


@dataclass(frozen=True)
class Settings:
    use_mock: bool = True
    base_url: str = "http://localhost:5000/api"
    mock_latency: float = 0.0  # seconds
    seed: Optional[int] = None
    catalog_path: Optional[str] = None
    max_turns: int = 10
    timeout: float = 10.0

    @property
    def mode(self) -> str:
        return "mock" if self.use_mock else "remote"


def load_settings() -> Settings:
    max_turns = _int("MARKETSIM_MAX_TURNS", 10)
    if max_turns is None or max_turns < 1:
        raise RuntimeError("MARKETSIM_MAX_TURNS must be >= 1")
    return Settings(
        use_mock=_flag("MARKETSIM_USE_MOCK", "true"),
        base_url=os.getenv("MARKETSIM_BASE_URL", "http://localhost:5000/api").rstrip("/"),
        mock_latency=max(0.0, _float("MARKETSIM_MOCK_LATENCY", 0.0)),
        seed=_int("MARKETSIM_SEED", None),
        catalog_path=os.getenv("MARKETSIM_CATALOG") or None,
        max_turns=max_turns,
        timeout=_float("MARKETSIM_TIMEOUT", 10.0),
    )
