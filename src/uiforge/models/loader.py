"""Model Loader - Gemini API client."""

from typing import Optional

import google.generativeai as genai

from ..core import get_logger
from .config import GeminiConfig


logger = get_logger(__name__)


class ModelLoadError(Exception):
    """Model loading failed."""
    pass


class GeminiModel:
    """Gemini API wrapper; one underlying model per distinct system instruction."""

    def __init__(self, config: GeminiConfig):
        self.config = config
        genai.configure(api_key=config.api_key)

        self.generation_config = genai.GenerationConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
            top_p=config.top_p,
            top_k=config.top_k,
        )
        self._models: dict[str | None, genai.GenerativeModel] = {}

        logger.info("model_loaded", model=config.model_name)

    def _model_for(self, system_instruction: str | None) -> genai.GenerativeModel:
        model = self._models.get(system_instruction)
        if model is None:
            model = genai.GenerativeModel(
                model_name=self.config.model_name,
                generation_config=self.generation_config,
                system_instruction=system_instruction,
            )
            self._models[system_instruction] = model
        return model

    def invoke(self, prompt: str, system_instruction: str | None = None) -> str:
        """Non-streaming generation."""
        try:
            response = self._model_for(system_instruction).generate_content(prompt)
            return response.text
        except Exception as e:
            logger.error("invoke_error", error=str(e))
            raise


class ModelLoader:
    """Model lifecycle manager."""

    _instance: Optional[GeminiModel] = None

    @classmethod
    def load(cls, config: GeminiConfig) -> GeminiModel:
        """Load model with config."""
        logger.info("loading", model=config.model_name)
        try:
            model = GeminiModel(config)
            cls._instance = model
            return model
        except Exception as e:
            logger.error("load_failed", error=str(e))
            raise ModelLoadError(f"Failed to load {config.model_name}") from e

    @classmethod
    def unload(cls) -> None:
        """Unload model."""
        if cls._instance:
            logger.info("unloading")
            cls._instance = None
