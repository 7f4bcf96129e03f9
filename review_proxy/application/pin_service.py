"""Pin / unpin reviews for prioritized display."""

import logging
from typing import Any, List

from ..errors import ValidationError

logger = logging.getLogger(__name__)

PIN_ACTIONS = ("pin", "unpin")


class PinService:

    def __init__(self, pin_store):
        self._store = pin_store

    def toggle(self, review_id: Any, action: str) -> List:
        """
        Add or remove one id and save the whole set.

        Idempotent: pinning a pinned id or unpinning an unpinned one leaves
        the set as it was.
        """
        if review_id is None or review_id == "" or not action:
            raise ValidationError("Missing id or action")
        if action not in PIN_ACTIONS:
            raise ValidationError(f"Unknown action: {action}")

        pinned_ids = self._store.load()
        if action == "pin":
            pinned_ids.add(review_id)
        else:
            pinned_ids.discard(review_id)

        if self._store.save(pinned_ids):
            logger.info(f"Review {review_id} {action}ned ({len(pinned_ids)} pinned)")
        return list(pinned_ids)
