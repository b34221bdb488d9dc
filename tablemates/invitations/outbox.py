from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)

_outbox: list[dict[str, Any]] = []


def send_invitation(
    venue_id: str,
    venue_name: str,
    start: datetime,
    end: datetime,
    participants: list[str],
) -> dict[str, Any]:
    """Queue an invitation for the notification collaborator to deliver."""
    invitation = {
        "venue_id": venue_id,
        "venue_name": venue_name,
        "start": start,
        "end": end,
        "participants": list(participants),
        "timestamp": time.time(),
    }
    _outbox.append(invitation)
    logger.info(
        "Queued invitation to %s for %d participants at %s", venue_name, len(participants), start
    )
    return invitation


def get_invitations() -> list[dict[str, Any]]:
    return _outbox


def clear_invitations() -> None:
    _outbox.clear()
