"""
API v1 router aggregating all endpoints.
"""

from fastapi import APIRouter

from api.v1.comments import router as comments_router
from api.v1.posts import router as posts_router
from api.v1.users import router as users_router
from api.v1.votes import router as votes_router
from schemas.common import ErrorResponse

# Every error body has the same {"detail", "code"} shape
error_responses = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 500, 503)
}

router = APIRouter(responses=error_responses)

router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(posts_router, prefix="/posts", tags=["Posts"])
router.include_router(comments_router, prefix="/comments", tags=["Comments"])
router.include_router(votes_router, prefix="/votes", tags=["Votes"])
