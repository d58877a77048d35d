from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .parking import Coordinates, ParsedQuery, ParkingSpot


class QueryType(str, Enum):
    new_search = "new_search"
    follow_up = "follow_up"
    refine = "refine"


class QueryClassification(BaseModel):
    type: QueryType
    reason: str = ""


class ConversationContext(BaseModel):
    """What the assistant remembers about one session between turns."""

    session_id: str
    last_query: Optional[str] = None
    last_results: List[ParkingSpot] = Field(default_factory=list)
    last_response: Optional[str] = None
    last_coordinates: Optional[Coordinates] = None
    timestamp: float = 0.0


class FollowUpAnswer(BaseModel):
    answer: str
    results: List[ParkingSpot] = Field(default_factory=list)
    needs_new_search: bool = False


class AIQueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class AIQueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    type: QueryType
    query: str
    parsed: Optional[ParsedQuery] = None
    ai_response: str = Field(alias="aiResponse")
    count: int
    data: List[ParkingSpot]


class SuggestionsResponse(BaseModel):
    success: bool = True
    suggestions: List[str]
