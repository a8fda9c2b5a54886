"""Dependency Injection Container."""

from injector import Binder, Injector, Module, provider, singleton

from .config import Settings, get_settings
from ..agents.pipeline import UIPipeline
from ..handlers.ui import UIHandler
from ..models.config import GeminiConfig
from ..models.loader import ModelLoader
from ..models.oracle import GeminiOracle, Oracle
from ..registry import ComponentRegistry, default_registry
from ..render import RenderEngine
from ..sessions import SessionStore


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_registry(self) -> ComponentRegistry:
        """Provide the component whitelist."""
        return default_registry()

    @singleton
    @provider
    def provide_store(self) -> SessionStore:
        return SessionStore()

    @singleton
    @provider
    def provide_oracle(self, settings: Settings) -> Oracle:
        """Provide the Gemini-backed oracle."""
        model = ModelLoader.load(GeminiConfig.from_settings(settings))
        return GeminiOracle(
            model,
            timeout=settings.oracle_timeout,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

    @singleton
    @provider
    def provide_engine(self, registry: ComponentRegistry) -> RenderEngine:
        return RenderEngine(registry)

    @singleton
    @provider
    def provide_pipeline(
        self, oracle: Oracle, store: SessionStore, registry: ComponentRegistry, settings: Settings
    ) -> UIPipeline:
        """Provide the orchestrator with all dependencies."""
        return UIPipeline(oracle=oracle, store=store, registry=registry, settings=settings)

    @singleton
    @provider
    def provide_handler(self, pipeline: UIPipeline, engine: RenderEngine) -> UIHandler:
        return UIHandler(pipeline, engine)


def create_container(settings: Settings | None = None, oracle: Oracle | None = None) -> Injector:
    """
    Create configured injector.

    Args:
        settings: Settings to use (cached environment settings by default)
        oracle: Replacement oracle, bound over the Gemini default
    """
    modules: list = [CoreModule(settings)]
    if oracle is not None:

        def bind_oracle(binder: Binder) -> None:
            binder.bind(Oracle, to=oracle)

        modules.append(bind_oracle)
    return Injector(modules)
