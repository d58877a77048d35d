from .classifier import classify_query
from .context_store import ContextStore
from .filters import apply_filters, filter_parking, sort_results
from .follow_up import answer_follow_up, filter_for_follow_up
from .geoapify import GeoapifyService, with_distances
from .query_parser import fallback_parser, parse_query, validate_parsed_query
from .responses import fallback_response, generate_response
