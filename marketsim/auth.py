# marketsim/auth.py
# Demo login only: one hard-coded student account for the mock, pass-through for a real server.

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger("Auth")

DEMO_EMAIL = "student@example.com"
DEMO_PASSWORD = "password"


class AuthError(Exception):
    pass


class MockAuthenticator:
    def login(self, email: str, password: str, remember_me: bool = False) -> Dict[str, Any]:
        if email == DEMO_EMAIL and password == DEMO_PASSWORD:
            return {"id": 1, "name": "Student", "email": email,
                    "token": "mock-token-123", "rememberMe": bool(remember_me)}
        raise AuthError(f"Invalid credentials (use {DEMO_EMAIL} / {DEMO_PASSWORD})")


class RemoteAuthenticator:
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def login(self, email: str, password: str, remember_me: bool = False) -> Dict[str, Any]:
        try:
            r = requests.post(f"{self.base_url}/login", json={"email": email, "password": password},
                              timeout=(3, max(4, self.timeout)))
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("loginUser failed: %s", e)
            raise AuthError("Login failed") from e
