"""
Admin Credential Store
======================

Holds the single admin account (username + bcrypt hash).

Backends:
- FirestoreCredentialStore: document users/admin
- FileCredentialStore:      config/users.json = {"admin": {"username", "password"}}
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from ..config.settings import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
ADMIN_KEY = "admin"


@dataclass
class AdminCredential:
    """Admin account record. `password` is a bcrypt hash."""
    username: str
    password: str


class CredentialStore(ABC):

    @abstractmethod
    def load_admin(self) -> Optional[AdminCredential]:
        """Return the admin record, or None if never initialised."""
        ...

    @abstractmethod
    def save_admin(self, credential: AdminCredential) -> bool:
        """Persist the admin record. Returns False when nothing was persisted."""
        ...


class FirestoreCredentialStore(CredentialStore):

    def __init__(self, client):
        self._doc = client.collection(USERS_COLLECTION).document(ADMIN_KEY)

    def load_admin(self) -> Optional[AdminCredential]:
        snapshot = self._doc.get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return AdminCredential(username=data.get("username", ""), password=data.get("password", ""))

    def save_admin(self, credential: AdminCredential) -> bool:
        self._doc.set(asdict(credential))
        return True


class FileCredentialStore(CredentialStore):

    def __init__(self, path: Path, ephemeral: bool = False):
        self.path = Path(path)
        self.ephemeral = ephemeral

    def load_admin(self) -> Optional[AdminCredential]:
        if not self.path.exists():
            return None
        with open(self.path, encoding="utf-8") as f:
            users = json.load(f)
        data = users.get(ADMIN_KEY)
        if not data:
            return None
        return AdminCredential(username=data.get("username", ""), password=data.get("password", ""))

    def save_admin(self, credential: AdminCredential) -> bool:
        if self.ephemeral:
            logger.warning("Serverless: admin credentials cannot be written to the local filesystem")
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({ADMIN_KEY: asdict(credential)}, f)
        logger.info(f"Admin credentials written: {self.path}")
        return True


def build_credential_store(settings: Settings, firestore_client=None) -> CredentialStore:
    """Firestore when a client is available, local file otherwise."""
    if firestore_client is not None:
        return FirestoreCredentialStore(firestore_client)
    return FileCredentialStore(settings.storage.users_file, ephemeral=settings.storage.ephemeral_filesystem)
