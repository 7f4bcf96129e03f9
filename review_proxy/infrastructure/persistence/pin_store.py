"""
Pinned Review Store
===================

Keeps the set of pinned review ids. The whole set is written on every change
(no diffing, last writer wins).

Backends:
- FirestorePinStore: document pinned_reviews/pins, field "ids"
- FilePinStore:      JSON array in config/pinned_reviews.json

Usage:
    store = build_pin_store(settings, firestore_client)
    ids = store.load()
    ids.add(42)
    store.save(ids)
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Set

from google.api_core.exceptions import GoogleAPIError

from ..config.settings import Settings

logger = logging.getLogger(__name__)

PINS_COLLECTION = "pinned_reviews"
PINS_DOCUMENT = "pins"


class PinStore(ABC):
    """Persistence for the pinned-id set."""

    @abstractmethod
    def load(self) -> Set:
        """Return the pinned ids. Missing state is an empty set."""
        ...

    @abstractmethod
    def save(self, ids: Iterable) -> bool:
        """Overwrite the pinned ids. Returns False when nothing was persisted."""
        ...


class FirestorePinStore(PinStore):

    def __init__(self, client):
        self._doc = client.collection(PINS_COLLECTION).document(PINS_DOCUMENT)

    def load(self) -> Set:
        try:
            snapshot = self._doc.get()
        except GoogleAPIError as e:
            logger.error(f"Error loading pinned reviews: {e}")
            return set()

        if not snapshot.exists:
            return set()
        return set((snapshot.to_dict() or {}).get("ids") or [])

    def save(self, ids: Iterable) -> bool:
        try:
            self._doc.set({"ids": list(ids)})
        except GoogleAPIError as e:
            logger.warning(f"Error saving pinned reviews to Firestore: {e}")
            return False
        return True


class FilePinStore(PinStore):

    def __init__(self, path: Path, ephemeral: bool = False):
        self.path = Path(path)
        self.ephemeral = ephemeral

    def load(self) -> Set:
        if not self.path.exists():
            return set()
        try:
            with open(self.path, encoding="utf-8") as f:
                return set(json.load(f))
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading pinned reviews from {self.path}: {e}")
            return set()

    def save(self, ids: Iterable) -> bool:
        if self.ephemeral:
            logger.warning(
                "Serverless: cannot save pinned reviews to the local filesystem. "
                "Configure Firestore for persistent pinning."
            )
            return False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(list(ids), f)
        except OSError as e:
            logger.warning(f"Error saving pinned reviews to {self.path}: {e}")
            return False
        return True


def build_pin_store(settings: Settings, firestore_client=None) -> PinStore:
    """Firestore when a client is available, local file otherwise."""
    if firestore_client is not None:
        return FirestorePinStore(firestore_client)
    return FilePinStore(settings.storage.pinned_file, ephemeral=settings.storage.ephemeral_filesystem)
