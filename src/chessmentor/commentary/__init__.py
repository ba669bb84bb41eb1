"""Move commentary: remote client with local fallback templates."""

from chessmentor.commentary.client import CommentaryClient, build_payload
from chessmentor.commentary.templates import (
    fallback_commentary,
    should_request_commentary,
)

__all__ = [
    "CommentaryClient",
    "build_payload",
    "fallback_commentary",
    "should_request_commentary",
]
