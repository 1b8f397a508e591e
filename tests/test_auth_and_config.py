import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from marketsim import auth  # noqa: E402
from marketsim.auth import AuthError, MockAuthenticator, RemoteAuthenticator  # noqa: E402
from marketsim.config import Settings, load_settings  # noqa: E402


def test_mock_login_accepts_demo_account():
    user = MockAuthenticator().login("student@example.com", "password", remember_me=True)
    assert user == {"id": 1, "name": "Student", "email": "student@example.com",
                    "token": "mock-token-123", "rememberMe": True}


def test_mock_login_rejects_others():
    with pytest.raises(AuthError, match="Invalid credentials"):
        MockAuthenticator().login("someone@example.com", "password")


def test_remote_login_raises_on_transport_error(monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(auth.requests, "post", boom)
    with pytest.raises(AuthError):
        RemoteAuthenticator("http://auth.local/api").login("a@b.c", "x")


def test_settings_defaults(monkeypatch):
    for name in ("MARKETSIM_USE_MOCK", "MARKETSIM_BASE_URL", "MARKETSIM_MOCK_LATENCY", "MARKETSIM_SEED",
                 "MARKETSIM_CATALOG", "MARKETSIM_MAX_TURNS", "MARKETSIM_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    assert load_settings() == Settings()


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("MARKETSIM_USE_MOCK", "no")
    monkeypatch.setenv("MARKETSIM_BASE_URL", "https://sim.example.com/api/")
    monkeypatch.setenv("MARKETSIM_SEED", "7")
    monkeypatch.setenv("MARKETSIM_MAX_TURNS", "4")
    s = load_settings()
    assert s.use_mock is False and s.mode == "remote"
    assert s.base_url == "https://sim.example.com/api"
    assert s.seed == 7 and s.max_turns == 4


@pytest.mark.parametrize("name,value", [("MARKETSIM_SEED", "abc"), ("MARKETSIM_MAX_TURNS", "0"),
                                        ("MARKETSIM_MOCK_LATENCY", "slow")])
def test_settings_reject_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        load_settings()
