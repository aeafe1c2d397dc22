from dictation.routes.credentials import router as credentials_router
from dictation.routes.sessions import router as sessions_router

__all__ = ["credentials_router", "sessions_router"]
