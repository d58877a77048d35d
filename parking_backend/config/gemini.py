from typing import Optional

import google.generativeai as genai

from . import settings
from .llm import LLMClient
from ..utils import logger


class GeminiClient(LLMClient):
    name = "gemini"

    def __init__(self, model_name: str = settings.GEMINI_MODEL, **kwargs):
        super().__init__(**kwargs)
        self.model_name = model_name

    async def _complete(
        self, system_prompt, user_prompt, temperature, max_tokens, json_mode
    ) -> str:
        model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_prompt,
        )
        generation_config = genai.GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else "text/plain",
        )
        response = await model.generate_content_async(
            user_prompt, generation_config=generation_config
        )
        if not response.candidates:
            raise ValueError("Gemini response missing candidates.")
        if not response.candidates[0].content.parts:
            raise ValueError("Gemini response candidate missing parts.")
        return response.text


def connection_to_gemini() -> Optional[GeminiClient]:
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        raise ValueError("GEMINI_API_KEY environment variable not set.")

    genai.configure(api_key=api_key)
    client = GeminiClient()
    logger.info(f"Gemini client initialized with model {client.model_name}.")
    return client
