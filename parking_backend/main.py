# parking_backend/main.py
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .config.llm import connection_to_llm
from .config.supabase import test_supabase_connection
from .exceptions import (
    ParkingAPIError,
    generic_exception_handler,
    parking_api_error_handler,
    validation_error_handler,
)
from .routes import routers
from .services.context_store import ContextStore
from .services.geoapify import GeoapifyService
from .utils import logger

# --- CORS Setup ---
origins = [
    settings.FRONTEND_URL,
    "http://localhost",
]
app = FastAPI(title="Smart Parking API", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One conversation store and one provider adapter per process, injected into
# handlers through dependencies.
app.state.context_store = ContextStore()
app.state.geoapify = GeoapifyService()

app.add_exception_handler(ParkingAPIError, parking_api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

for router in routers:
    app.include_router(router)


@app.on_event("startup")
async def startup_event():
    """Initialize resources on startup."""
    llm = connection_to_llm()
    logger.info(f"🤖 LLM backend: {llm.name if llm else 'disabled (fallback parser)'}")
    test_supabase_connection()
    logger.info(f"🚀 Smart Parking Backend ready on port {settings.PORT}")


@app.get("/health")
async def health():
    return {"status": "ok", "message": "Smart Parking API is running"}
