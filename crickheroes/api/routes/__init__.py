"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter) lives here; every sub-router imports what it
needs from this package.
"""

import os

from fastapi import APIRouter
from slowapi import Limiter
from slowapi.util import get_remote_address

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
if IS_TEST_ENV:
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)

# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from crickheroes.api.routes.auth import router as auth_router
from crickheroes.api.routes.players import router as players_router
from crickheroes.api.routes.player_details import router as player_details_router
from crickheroes.api.routes.matches import router as matches_router
from crickheroes.api.routes.results import router as results_router
from crickheroes.api.routes.gallery import router as gallery_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(players_router)
router.include_router(player_details_router)
router.include_router(matches_router)
router.include_router(results_router)
router.include_router(gallery_router)
