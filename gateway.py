"""Storage for submitted questionnaires.

The only operation the questionnaire needs is "insert one flat record".
Supabase exposes each table through PostgREST, so a single POST to
``/rest/v1/<table>`` is enough and no client SDK is involved.
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol

import httpx

from catalog import COPY
from errors import PersistenceFailed, PersistenceRejected, PersistenceUnavailable

logger = logging.getLogger(__name__)


class PersistenceGateway(Protocol):
    def insert(self, record: Mapping[str, str]) -> None:
        """Store ``record`` or raise a ``PersistenceError``."""


class UnconfiguredGateway:
    def insert(self, record: Mapping[str, str]) -> None:
        raise PersistenceUnavailable(COPY["errors"]["not_configured"], reason="storage is not configured")


class SupabaseGateway:
    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "questionnaire_responses",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.table = table
        self._api_key = api_key
        self._client = client or httpx.Client(base_url=url.rstrip("/"), timeout=timeout)

    @property
    def headers(self) -> dict:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    def insert(self, record: Mapping[str, str]) -> None:
        try:
            response = self._client.post(f"/rest/v1/{self.table}", json=[dict(record)], headers=self.headers)
        except httpx.TransportError as exc:
            logger.error("Supabase unreachable: %s", exc)
            raise PersistenceUnavailable(reason=str(exc)) from exc
        except httpx.HTTPError as exc:
            logger.error("Supabase insert failed: %s", exc)
            raise PersistenceFailed(reason=str(exc)) from exc

        if response.is_error:
            reason = f"HTTP {response.status_code}: {response.text[:200]}"
            logger.error("Supabase rejected insert into %s: %s", self.table, reason)
            raise PersistenceRejected(reason=reason)

    def close(self) -> None:
        self._client.close()


def build_gateway(settings) -> PersistenceGateway:
    if not settings.supabase_configured:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set; submissions will fail")
        return UnconfiguredGateway()
    return SupabaseGateway(
        url=settings.SUPABASE_URL,
        api_key=settings.SUPABASE_ANON_KEY,
        table=settings.SUPABASE_TABLE,
        timeout=settings.REQUEST_TIMEOUT,
    )
