import asyncio
from typing import Iterable, Optional

import httpx
import structlog
from fastapi import Request

from shared.errors import DependencyUnavailable
from shared.observability.metrics import ecomm_remote_lookup_total

logger = structlog.get_logger(__name__)

LOOKUP_TIMEOUT = 5.0


class RemoteLookupClient:
    """
    Fetches an entity owned by another service: GET <base_url>/<id>.

    Exactly one attempt per call, bounded by `timeout`. Every failure mode
    (transport error, timeout, non-2xx, body that is not a JSON object) comes
    back as None. Callers read None as "could not verify", except where they
    deliberately treat it as invalid input.
    """

    def __init__(self, http: httpx.AsyncClient, base_urls: dict[str, str], timeout: float = LOOKUP_TIMEOUT):
        self.http = http
        self.base_urls = base_urls
        self.timeout = timeout

    async def _get(self, entity_kind: str, entity_id) -> Optional[dict]:
        """None on 404; DependencyUnavailable for every other failure."""
        url = f"{self.base_urls[entity_kind].rstrip('/')}/{entity_id}"
        try:
            resp = await self.http.get(url, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise DependencyUnavailable(f"{entity_kind} lookup failed: {e!r}") from e

        if resp.status_code == 404:
            return None
        if not resp.is_success:
            raise DependencyUnavailable(f"{entity_kind} service answered {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            raise DependencyUnavailable(f"{entity_kind} service sent a non-JSON body") from e
        if not isinstance(body, dict):
            raise DependencyUnavailable(f"{entity_kind} service sent {type(body).__name__}, expected an object")
        return body

    async def fetch(self, entity_kind: str, entity_id) -> Optional[dict]:
        try:
            entity = await self._get(entity_kind, entity_id)
        except DependencyUnavailable as e:
            ecomm_remote_lookup_total.labels(entity=entity_kind, outcome="error").inc()
            logger.warning("remote_lookup_failed", entity=entity_kind, entity_id=entity_id, error=e.message)
            return None

        outcome = "absent" if entity is None else "found"
        ecomm_remote_lookup_total.labels(entity=entity_kind, outcome=outcome).inc()
        return entity

    async def fetch_many(self, entity_kind: str, entity_ids: Iterable) -> list[Optional[dict]]:
        """Concurrent fetches; results line up with `entity_ids`."""
        return list(await asyncio.gather(*(self.fetch(entity_kind, i) for i in entity_ids)))


def get_lookup_client(request: Request) -> RemoteLookupClient:
    resources = request.app.state.resources
    return RemoteLookupClient(
        resources.http,
        resources.settings.service_urls,
        timeout=resources.settings.lookup_timeout,
    )
