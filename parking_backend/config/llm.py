import asyncio
from typing import Optional

from . import settings
from ..utils import logger


class LLMClient:
    """Common interface of the language model backends.

    Subclasses implement ``_complete``; callers use ``complete``, which bounds
    every call by ``timeout`` seconds. A timeout surfaces as
    ``asyncio.TimeoutError`` and is handled like any other provider failure.
    """

    name = "llm"

    def __init__(self, timeout: float = settings.LLM_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 300,
        json_mode: bool = False,
    ) -> str:
        return await asyncio.wait_for(
            self._complete(
                system_prompt,
                user_prompt,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode,
            ),
            timeout=self.timeout,
        )

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> str:
        raise NotImplementedError


llm_client: Optional[LLMClient] = None
# Set once the provider has been resolved, even when the answer is "no model".
_llm_resolved = False


def _build_client(provider: str) -> Optional[LLMClient]:
    if provider == "gemini":
        from .gemini import connection_to_gemini

        return connection_to_gemini()
    if provider == "openai":
        from .openai_client import connection_to_openai

        return connection_to_openai()
    return None


def connection_to_llm() -> Optional[LLMClient]:
    """Return the configured language model client, or None when AI is off.

    With ``LLM_PROVIDER=auto`` the first backend that has an API key wins,
    Gemini before OpenAI. The outcome, including "no model", is decided once
    per process.
    """
    global llm_client, _llm_resolved
    if _llm_resolved:
        return llm_client
    _llm_resolved = True

    provider = settings.LLM_PROVIDER
    if provider == "none":
        return None
    if provider == "auto":
        if settings.GEMINI_API_KEY:
            provider = "gemini"
        elif settings.OPENAI_API_KEY:
            provider = "openai"
        else:
            logger.warning("⚠️  No LLM API key configured, using fallback parser")
            return None

    try:
        llm_client = _build_client(provider)
    except Exception as e:
        logger.error(f"Error initializing {provider} client: {e}")
        llm_client = None
    if llm_client is None:
        logger.warning(f"⚠️  LLM provider '{provider}' unavailable, using fallbacks")
    return llm_client
