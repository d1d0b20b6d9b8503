"""One-shot publishing of the addon manifest to the Stremio central registry."""

from __future__ import annotations

import httpx
import structlog

log = structlog.get_logger(__name__)

DEFAULT_CENTRAL_URL = "https://api.strem.io/api/addonPublish"


class CentralPublishError(Exception):
    """Raised when the registry rejects or cannot receive a publish request."""


async def publish_to_central(
    http_client: httpx.AsyncClient,
    manifest_url: str,
    *,
    central_url: str = DEFAULT_CENTRAL_URL,
) -> None:
    """Register *manifest_url* with the Stremio addon catalog.

    Raises:
        CentralPublishError: network failure, non-2xx status, or an
            ``error`` field in the registry's JSON reply.
    """
    payload = {"transportUrl": manifest_url, "transportName": "http"}
    try:
        resp = await http_client.post(central_url, json=payload)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise CentralPublishError(f"publish to {central_url} failed: {exc}") from exc

    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        raise CentralPublishError(f"registry rejected manifest: {body['error']}")

    log.info("central_publish_ok", manifest_url=manifest_url, central_url=central_url)
