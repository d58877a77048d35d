import time
from typing import Optional

from fastapi import APIRouter, Depends

from ..config.llm import LLMClient
from ..dependencies import get_context_store, get_geoapify, get_llm
from ..exceptions import ParkingAPIError
from ..schemas.ai import AIQueryRequest, AIQueryResponse, SuggestionsResponse
from ..services.assistant import SUGGESTIONS, process_query
from ..services.context_store import ContextStore
from ..services.geoapify import GeoapifyService
from ..utils import logger

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/query", response_model=AIQueryResponse)
async def query_endpoint(
    request: AIQueryRequest,
    store: ContextStore = Depends(get_context_store),
    llm: Optional[LLMClient] = Depends(get_llm),
    geoapify: GeoapifyService = Depends(get_geoapify),
):
    """Natural-language parking search with per-session conversation context."""
    if not request.query or not request.query.strip():
        raise ParkingAPIError(400, "Missing required parameter: query")

    start_time = time.time()
    logger.info(
        f"📩 NEW REQUEST | Session: {request.session_id} | Query: '{request.query}'"
    )
    try:
        response = await process_query(
            request.query.strip(), request.session_id, store, llm, geoapify
        )
    except Exception as e:
        logger.exception(f"❌ AI query error: {e}")
        raise ParkingAPIError(500, "Failed to process AI query", str(e)) from e

    logger.info(
        f"✅ {response.type.value} | {response.count} results | "
        f"{time.time() - start_time:.2f}s"
    )
    return response


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions_endpoint():
    return SuggestionsResponse(suggestions=SUGGESTIONS)
