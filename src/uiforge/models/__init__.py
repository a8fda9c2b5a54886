"""
Models package - Gemini API integration.
Oracle interface and the Gemini-backed implementation.
"""

from .config import GeminiConfig, GeminiModelName
from .loader import ModelLoader, GeminiModel, ModelLoadError
from .oracle import Oracle, GeminiOracle, BreakerListener

__all__ = [
    "GeminiConfig",
    "GeminiModelName",
    "GeminiModel",
    "ModelLoader",
    "ModelLoadError",
    "Oracle",
    "GeminiOracle",
    "BreakerListener",
]
