"""
Comment rendering.

The faithful renderer embeds the text verbatim; the hardened renderer
HTML-escapes it. Both share the same wrapper and empty-comment response.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog
from markupsafe import escape

from shared.models.common import StrategyMode

logger = structlog.get_logger(__name__)

EMPTY_COMMENT = "<div>Empty comment</div>"
COMMENT_PREFIX = "<div>Comment added: "
COMMENT_SUFFIX = "</div>"


class CommentRenderer(ABC):
    """Wraps free text in the comment template."""

    mode: StrategyMode

    def render(self, comment: Optional[str]) -> str:
        """
        Render a comment.

        Args:
            comment: Submitted text, possibly None or empty

        Returns:
            The wrapped comment, or the empty-comment response
        """
        if not comment:
            return EMPTY_COMMENT
        return f"{COMMENT_PREFIX}{self.encode(comment)}{COMMENT_SUFFIX}"

    @abstractmethod
    def encode(self, comment: str) -> str:
        """Transform the text before it is wrapped."""


class FaithfulCommentRenderer(CommentRenderer):
    """Echoes the text byte for byte, markup included."""

    mode = StrategyMode.FAITHFUL

    def encode(self, comment: str) -> str:
        return comment


class HardenedCommentRenderer(CommentRenderer):
    """Escapes HTML special characters before wrapping."""

    mode = StrategyMode.HARDENED

    def encode(self, comment: str) -> str:
        encoded = str(escape(comment))
        if encoded != comment:
            logger.info("comment_markup_escaped", length=len(comment))
        return encoded


def build_comment_renderer(mode: StrategyMode) -> CommentRenderer:
    """Create the renderer for ``mode``."""
    if mode is StrategyMode.HARDENED:
        return HardenedCommentRenderer()
    return FaithfulCommentRenderer()
