"""
Comment listing route.
"""

from fastapi import APIRouter, Depends

from shared import responses
from ..adapters.comments_client import CommentsClient
from ..domain.auth_middleware import AuthGate
from ..domain.validation import comments_query
from ..models import CommentsQuery


def build_comments_router(comments: CommentsClient, auth_gate: AuthGate) -> APIRouter:
    router = APIRouter(
        prefix="/comments",
        tags=["comments"],
        dependencies=[Depends(auth_gate.optional)],
    )

    @router.get("")
    async def list_comments(query: CommentsQuery = Depends(comments_query)):
        items = await comments.list_comments(query)
        return responses.success({"count": len(items), "comments": items})

    return router
