"""Text-generation backends.

A backend has one capability: send a system prompt and a user prompt, get the
answer text back. All providers are reached through LiteLLM; the selector
string given at configuration time picks the model prefix and endpoint.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

import litellm
from litellm import acompletion
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from autol10n.exceptions import UnknownProviderError

logger = logging.getLogger(__name__)

# Provider errors worth another attempt
TRANSIENT_ERRORS = (
    litellm.RateLimitError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
    litellm.APIConnectionError,
    litellm.Timeout,
)


class ChatBackend(ABC):
    """A text-generation backend bound to one provider and model."""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get provider name."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Get model identifier."""

    @abstractmethod
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send a system/user prompt pair and return the answer text."""


class LiteLLMBackend(ChatBackend):
    """Backend for any provider supported by LiteLLM."""

    def __init__(
        self,
        api_key: str,
        model: str,
        provider_name: str,
        model_prefix: str = "",
        base_url: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        max_retries: int = 5,
        retry_min_wait: float = 2.0,
        retry_max_wait: float = 30.0,
    ):
        """Initialize LiteLLM backend.

        Args:
            api_key: API key for authentication (may be empty for local models)
            model: Model identifier, with or without the LiteLLM prefix
            provider_name: Provider name for logging
            model_prefix: LiteLLM routing prefix (e.g. ``mistral/``)
            base_url: Optional custom base URL for compatible APIs
            temperature: Sampling temperature
            max_tokens: Optional cap on answer length
            max_retries: Attempts for transient provider errors
            retry_min_wait: Minimum wait between attempts (seconds)
            retry_max_wait: Maximum wait between attempts (seconds)
        """
        self._api_key = api_key
        self._model = model
        self._provider = provider_name
        self._base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max(1, max_retries)
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait

        if model_prefix and not model.startswith(model_prefix):
            self._litellm_model = f"{model_prefix}{model}"
        else:
            self._litellm_model = model

        logger.debug(
            f"{provider_name} backend initialization with model {model} "
            f"(litellm_model={self._litellm_model}, base_url={base_url})"
        )

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    @property
    def litellm_model(self) -> str:
        return self._litellm_model

    def _build_kwargs(self, system_prompt: str, user_prompt: str) -> dict:
        kwargs = {
            "model": self._litellm_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._base_url:
            kwargs["api_base"] = self._base_url
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens
        return kwargs

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Call the model, retrying transient provider errors.

        Raises:
            Exception: The provider error once retries are exhausted
        """
        kwargs = self._build_kwargs(system_prompt, user_prompt)
        start_time = time.time()

        logger.info(f"LLM call: model={self._litellm_model}, provider={self._provider}")

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.retry_min_wait, max=self.retry_max_wait),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                response = await acompletion(**kwargs)

        latency_ms = int((time.time() - start_time) * 1000)
        total_tokens = response.usage.total_tokens if getattr(response, "usage", None) else 0
        logger.info(f"LLM response: tokens={total_tokens}, latency={latency_ms}ms")

        return (response.choices[0].message.content or "").strip()


BackendBuilder = Callable[..., ChatBackend]


class BackendFactory:
    """Creates backends from a provider selector string."""

    # Provider configurations
    PROVIDER_CONFIGS: Dict[str, dict] = {
        "mistral": {"class": LiteLLMBackend, "prefix": "mistral/", "base_url": None},
        "openai": {"class": LiteLLMBackend, "prefix": "openai/", "base_url": None},
        "google": {"class": LiteLLMBackend, "prefix": "gemini/", "base_url": None},
        "gemini": {"class": LiteLLMBackend, "prefix": "gemini/", "base_url": None},
        "anthropic": {"class": LiteLLMBackend, "prefix": "anthropic/", "base_url": None},
        "deepseek": {
            "class": LiteLLMBackend,
            "prefix": "deepseek/",
            "base_url": "https://api.deepseek.com/v1",
        },
        "ollama": {"class": LiteLLMBackend, "prefix": "ollama/", "base_url": None},
        "openrouter": {"class": LiteLLMBackend, "prefix": "openrouter/", "base_url": None},
    }

    @classmethod
    def register(cls, name: str, backend_class: BackendBuilder, **defaults) -> None:
        """Register a backend constructor for a provider name.

        ``backend_class`` is called with ``api_key``, ``model`` and
        ``provider_name`` plus the factory keyword arguments.
        """
        cls.PROVIDER_CONFIGS[name.lower()] = {"class": backend_class, **defaults}

    @classmethod
    def create(cls, provider: str, model: str, api_key: str, **kwargs) -> ChatBackend:
        """Create a backend for the specified provider.

        Args:
            provider: Provider selector (mistral, openai, google, ...)
            model: Model identifier
            api_key: API key for authentication
            **kwargs: Extra backend options (base_url, temperature, ...)

        Raises:
            UnknownProviderError: If the provider is not registered
        """
        provider = provider.lower()
        config = cls.PROVIDER_CONFIGS.get(provider)
        if config is None:
            raise UnknownProviderError(
                f"Unknown provider: {provider}. Available: {cls.available_providers()}"
            )

        options = {key: value for key, value in config.items() if key not in ("class", "prefix")}
        if "prefix" in config:
            options["model_prefix"] = config["prefix"]
        # Explicit options win over provider defaults; None means "not set"
        options.update({key: value for key, value in kwargs.items() if value is not None})

        return config["class"](
            api_key=api_key,
            model=model,
            provider_name=provider,
            **options,
        )

    @classmethod
    def available_providers(cls) -> list[str]:
        return sorted(cls.PROVIDER_CONFIGS.keys())
