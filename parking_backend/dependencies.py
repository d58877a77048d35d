from typing import Optional

from fastapi import Request

from .config.llm import LLMClient, connection_to_llm
from .services.context_store import ContextStore
from .services.geoapify import GeoapifyService


def get_context_store(request: Request) -> ContextStore:
    return request.app.state.context_store


def get_geoapify(request: Request) -> GeoapifyService:
    return request.app.state.geoapify


def get_llm() -> Optional[LLMClient]:
    return connection_to_llm()
