from .ai import router as ai_router
from .auth import router as auth_router
from .bookings import router as bookings_router
from .parking import router as parking_router

routers = [parking_router, ai_router, auth_router, bookings_router]
