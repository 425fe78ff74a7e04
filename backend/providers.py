"""
LLM provider adapters.

Each provider exposes a single capability, `await provider.generate(prompt)`,
returning the raw completion text. The call is bounded by an explicit timeout
and is never retried; every failure surfaces as ProviderError.
"""
import asyncio
import logging
from typing import Optional

import anthropic
import google.generativeai as genai
import openai
from google.api_core import exceptions as google_exceptions

from config import Settings
from errors import ProviderError
from prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class LLMProvider:
    name = "base"
    # SDK exceptions that mean "the provider call failed"
    sdk_errors: tuple[type[Exception], ...] = ()

    def __init__(self, api_key: Optional[str], model: str, timeout: float = 30.0,
                 system_prompt: str = SYSTEM_PROMPT):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.system_prompt = system_prompt

    async def _complete(self, prompt: str) -> Optional[str]:
        raise NotImplementedError

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise ProviderError(f"{self.name} API key not configured")

        try:
            text = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"{self.name} call timed out after {self.timeout}s") from e
        except self.sdk_errors as e:
            raise ProviderError(f"{self.name} API error: {e}") from e

        if not text:
            raise ProviderError(f"{self.name} returned an empty or blocked response")

        logger.debug("%s response: %s", self.name, text)
        return text


class AnthropicProvider(LLMProvider):
    name = "anthropic"
    sdk_errors = (anthropic.AnthropicError,)

    def __init__(self, *args, max_tokens: int = 1024, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_tokens = max_tokens
        self._client: Optional[anthropic.AsyncAnthropic] = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key, timeout=self.timeout, max_retries=0
            )
        return self._client

    async def _complete(self, prompt: str) -> Optional[str]:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=self.system_prompt,
            messages=[{"role": "user", "content": prompt}],
        )
        # Skip non-text blocks (e.g. tool_use); none at all counts as empty
        return next((block.text for block in response.content if getattr(block, "type", None) == "text"), None)


class OpenAIProvider(LLMProvider):
    name = "openai"
    sdk_errors = (openai.OpenAIError,)

    def __init__(self, *args, temperature: float = 0.1, **kwargs):
        super().__init__(*args, **kwargs)
        self.temperature = temperature
        self._client: Optional[openai.AsyncOpenAI] = None

    @property
    def client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key, timeout=self.timeout, max_retries=0
            )
        return self._client

    async def _complete(self, prompt: str) -> Optional[str]:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class GeminiProvider(LLMProvider):
    name = "gemini"
    sdk_errors = (google_exceptions.GoogleAPIError,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._model: Optional[genai.GenerativeModel] = None

    @property
    def generative_model(self) -> genai.GenerativeModel:
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model, system_instruction=self.system_prompt)
        return self._model

    async def _complete(self, prompt: str) -> Optional[str]:
        response = await self.generative_model.generate_content_async(
            prompt, request_options={"timeout": self.timeout}
        )
        # response.text raises ValueError when the candidate was blocked
        try:
            return response.text
        except ValueError as e:
            raise ProviderError(f"gemini response blocked: {e}") from e


PROVIDERS: dict[str, type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}


def create_provider(settings: Settings) -> LLMProvider:
    """Construct the provider selected by settings.llm_provider."""
    provider_cls = PROVIDERS[settings.llm_provider]
    return provider_cls(settings.api_key, settings.model, timeout=settings.llm_timeout_seconds)
