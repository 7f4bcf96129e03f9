from .credential_store import (
    AdminCredential,
    CredentialStore,
    FileCredentialStore,
    FirestoreCredentialStore,
    build_credential_store,
)
from .firestore import create_firestore_client
from .pin_store import FilePinStore, FirestorePinStore, PinStore, build_pin_store

__all__ = [
    "AdminCredential",
    "CredentialStore",
    "FileCredentialStore",
    "FirestoreCredentialStore",
    "build_credential_store",
    "create_firestore_client",
    "FilePinStore",
    "FirestorePinStore",
    "PinStore",
    "build_pin_store",
]
