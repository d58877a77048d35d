from typing import Optional

from openai import AsyncOpenAI

from . import settings
from .llm import LLMClient
from ..utils import logger


class OpenAIClient(LLMClient):
    name = "openai"

    def __init__(self, client: AsyncOpenAI, model_name: str = settings.OPENAI_MODEL, **kwargs):
        super().__init__(**kwargs)
        self.client = client
        self.model_name = model_name

    async def _complete(
        self, system_prompt, user_prompt, temperature, max_tokens, json_mode
    ) -> str:
        extra = {"response_format": {"type": "json_object"}} if json_mode else {}
        completion = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            **extra,
        )
        content = completion.choices[0].message.content
        if content is None:
            raise ValueError("OpenAI response missing message content.")
        return content


def connection_to_openai() -> Optional[OpenAIClient]:
    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise ValueError("OPENAI_API_KEY environment variable not set.")

    client = OpenAIClient(AsyncOpenAI(api_key=api_key))
    logger.info(f"OpenAI client initialized with model {client.model_name}.")
    return client
