"""Credential storage."""

from crieur.infrastructure.storage.credential_store import (
    CredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)

__all__ = ["CredentialStore", "FileCredentialStore", "InMemoryCredentialStore"]
