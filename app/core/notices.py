# app/core/notices.py
import logging

from fastapi import Response

logger = logging.getLogger(__name__)

# Non-blocking message for the client to show (toast) next to the payload.
NOTICE_HEADER = "X-Notice"


def empty_with_notice(response: Response, notice: str) -> list:
    """
    Degraded list response: log the active exception, attach the notice
    header and return an empty list so the client stays usable.

    Must be called from inside an `except` block.
    """
    logger.exception(notice)
    response.headers[NOTICE_HEADER] = notice
    return []
