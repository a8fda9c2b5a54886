"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from uiforge.agents import UIPipeline
from uiforge.core import Settings, create_container
from uiforge.models import Oracle
from uiforge.monitoring import MetricsCollector
from uiforge.registry import default_registry
from uiforge.render import RenderEngine
from uiforge.server import create_app
from uiforge.sessions import SessionStore


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["UIFORGE_LOG_LEVEL"] = "DEBUG"
    os.environ["GEMINI_API_KEY"] = "test-api-key"  # Never used for real calls


# ============================================================================
# Oracle Doubles
# ============================================================================

class ScriptedOracle(Oracle):
    """Oracle that replays scripted responses (or raises scripted errors)."""

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls: list[tuple[str, str]] = []

    async def propose(self, system_instructions: str, context: str) -> str:
        self.calls.append((system_instructions, context))
        if not self.responses:
            raise AssertionError("oracle called more times than scripted")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class FixedClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings (environment file ignored)."""
    return Settings(_env_file=None, gemini_api_key="test-api-key")


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def engine(registry):
    return RenderEngine(registry)


@pytest.fixture
def metrics():
    """Metrics collector on an isolated Prometheus registry."""
    return MetricsCollector(CollectorRegistry())


@pytest.fixture
def make_pipeline(store, registry, settings, metrics):
    """Factory: pipeline around a ScriptedOracle with the given responses."""

    def _make(*responses, **overrides):
        oracle = ScriptedOracle(responses)
        pipeline_settings = settings.model_copy(update=overrides) if overrides else settings
        pipeline = UIPipeline(oracle, store, registry, pipeline_settings, metrics=metrics)
        return pipeline, oracle

    return _make


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def login_plan():
    """Plan for "a login form with email and password"."""
    return {
        "layout": {
            "type": "Container",
            "props": {},
            "children": [
                {
                    "type": "Card",
                    "props": {"title": "Login"},
                    "children": [
                        {
                            "type": "Flex",
                            "props": {"direction": "column", "gap": "md"},
                            "children": [
                                {
                                    "type": "Input",
                                    "props": {"label": "Email", "type": "email", "placeholder": "Enter your email"},
                                },
                                {
                                    "type": "Input",
                                    "props": {
                                        "label": "Password",
                                        "type": "password",
                                        "placeholder": "Enter your password",
                                    },
                                },
                                {"type": "Button", "props": {"children": "Sign In", "variant": "primary"}},
                            ],
                        }
                    ],
                }
            ],
        }
    }


@pytest.fixture
def dashboard_plan():
    return {
        "layout": {
            "type": "Container",
            "children": [
                {"type": "Navbar", "props": {"brand": "Acme", "items": ["Home", "Reports"]}},
                {"type": "Typography", "props": {"variant": "h2", "children": "Overview"}},
                {
                    "type": "Grid",
                    "props": {"columns": 2},
                    "children": [
                        {
                            "type": "Card",
                            "props": {"title": "Sales"},
                            "children": [
                                {
                                    "type": "Chart",
                                    "props": {"type": "bar", "data": [{"label": "Q1", "value": 10}, {"label": "Q2", "value": 20}]},
                                }
                            ],
                        },
                        {
                            "type": "Table",
                            "props": {"columns": ["Name", "Total"], "rows": [["Ann", 3], ["Bob", 4.5]]},
                        },
                    ],
                },
            ],
        }
    }


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def oracle():
    """Scripted oracle; tests append responses before calling the API."""
    return ScriptedOracle()


@pytest.fixture
def container(settings, oracle):
    return create_container(settings, oracle=oracle)


@pytest.fixture
def client(container):
    """HTTP client against an app wired to the scripted oracle."""
    with TestClient(create_app(container)) as test_client:
        yield test_client
