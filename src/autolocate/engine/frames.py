"""
Frame enumeration - the page plus every nested document.
"""

import logging
from typing import Any, List

logger = logging.getLogger(__name__)


def all_contexts(page: Any) -> List[Any]:
    """
    Return the page followed by each of its child frames, in document order.

    The main frame is represented by the page itself. A frame that fails
    to answer (detached mid-navigation, cross-process hiccup) is left out.

    Args:
        page: Playwright Page

    Returns:
        List of Page/Frame objects that support the locator API
    """
    contexts: List[Any] = [page]
    try:
        frames = list(page.frames)
        main_frame = page.main_frame
    except Exception as e:
        logger.debug(f"Frame enumeration failed: {e}")
        return contexts

    for frame in frames:
        try:
            if frame is main_frame or frame.is_detached():
                continue
            contexts.append(frame)
        except Exception as e:
            logger.debug(f"Skipping frame: {e}")
    return contexts


def context_url(ctx: Any) -> str:
    """URL of a page or frame, empty when it can't be read."""
    try:
        return ctx.url or ""
    except Exception:
        return ""
