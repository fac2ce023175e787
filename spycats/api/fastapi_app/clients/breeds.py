from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from spycats.core.exceptions import RegistryUnavailable
from spycats.core.telemetry.metrics import metrics_enabled, get_breed_lookups_total

logger = logging.getLogger(__name__)


class BreedRegistry:
    """Catalogue externe (lecture seule) des races de chats valides.

    Chaque consultation télécharge la liste complète et compare sur ``name``
    (égalité stricte). Toute erreur de transport, timeout, statut non-2xx ou
    payload illisible est remontée en ``RegistryUnavailable``.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.api_key = api_key
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        h = {"Accept": "application/json"}
        if self.api_key:
            h["x-api-key"] = self.api_key
        return h

    async def list_breeds(self) -> List[str]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.get(self.url, headers=self._headers())
                r.raise_for_status()
                payload: Any = r.json()
        except httpx.HTTPError as e:
            self._count("error")
            logger.warning("breed registry unreachable: %s", e)
            raise RegistryUnavailable(f"failed to validate breed: {e}") from e
        except ValueError as e:
            self._count("error")
            raise RegistryUnavailable("failed to validate breed: invalid response from breed registry") from e

        if not isinstance(payload, list):
            self._count("error")
            raise RegistryUnavailable("failed to validate breed: invalid response from breed registry")
        return [b["name"] for b in payload if isinstance(b, dict) and isinstance(b.get("name"), str)]

    async def exists(self, breed: str) -> bool:
        names = await self.list_breeds()
        found = breed in names
        self._count("found" if found else "unknown")
        return found

    @staticmethod
    def _count(outcome: str) -> None:
        if metrics_enabled():
            get_breed_lookups_total().labels(outcome=outcome).inc()
