import json
import logging
import re
from typing import Any, Dict

from .config.settings import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("parking_backend")

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse model output that should hold a single JSON object.

    Markdown code fences are stripped first. Raises ValueError when the text is
    not valid JSON or the top level is not an object.
    """
    if not text:
        raise ValueError("Empty model response")
    cleaned = _CODE_FENCE.sub("", text.strip())
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
