"""
Adapter between the credential table and the ``Credential`` domain model.
"""

from __future__ import annotations

import json
import time
from typing import Any, Iterable, Mapping, Optional

from meta_ads_mcp.clients.sqlite_store import SQLiteCredentialStore
from meta_ads_mcp.models.credential import Credential, LinkedResource
from meta_ads_mcp.services.token_cipher import TokenCipherService


class TokenStore:
    """Persist one credential per user with upsert semantics."""

    def __init__(self, store: SQLiteCredentialStore, token_cipher: TokenCipherService) -> None:
        self._store = store
        self._cipher = token_cipher

    def get_credential(self, user_id: str) -> Optional[Credential]:
        """Return the stored credential for ``user_id`` or ``None``."""
        row = self._store.get_row(user_id)
        if not row:
            return None

        accounts = json.loads(row["ad_accounts"] or "[]")
        return Credential(
            user_id=row["user_id"],
            access_token=self._cipher.decrypt(row["meta_access_token"]),
            expires_at=row["token_expires_at"],
            linked_resources=[LinkedResource.model_validate(item) for item in accounts],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def upsert_credential(
        self,
        *,
        user_id: str,
        access_token: str,
        expires_at: int,
        linked_resources: Iterable[Mapping[str, Any]],
        now: Optional[int] = None,
    ) -> Credential:
        """Write a credential, replacing any previous one except its ``created_at``."""
        timestamp = int(time.time()) if now is None else now
        # Rows that could not be read back must never be written.
        resources = [LinkedResource.model_validate(dict(item)) for item in linked_resources]
        self._store.upsert_row(
            user_id=user_id,
            access_token=self._cipher.encrypt(access_token),
            expires_at=expires_at,
            ad_accounts=json.dumps([resource.model_dump() for resource in resources]),
            now=timestamp,
        )
        credential = self.get_credential(user_id)
        if credential is None:
            raise RuntimeError(f"Credential for user {user_id} vanished after upsert.")
        return credential

    def delete_credential(self, user_id: str) -> bool:
        return self._store.delete_row(user_id)


__all__ = ["TokenStore"]
