"""Blocking download of the specification source."""

from __future__ import annotations

import httpx

from shaderspec.telemetry import metrics as telemetry_metrics
from shaderspec.telemetry.logger import get_logger

__all__ = ["DEFAULT_TIMEOUT", "FetchError", "download_text"]

DEFAULT_TIMEOUT = 5.0

_LOGGER = get_logger("shaderspec.fetch")


class FetchError(RuntimeError):
    """Raised when the document could not be retrieved."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code


def download_text(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.Client | None = None,
) -> str:
    """GET ``url`` and return the body as text.

    Read and write are bounded by ``timeout`` seconds. A caller-provided
    ``client`` is used as-is and left open.
    """

    limits = httpx.Timeout(None, read=timeout, write=timeout)
    _LOGGER.info("fetching %s", url)
    try:
        if client is not None:
            response = client.get(url, timeout=limits)
        else:
            with httpx.Client(follow_redirects=True) as owned:
                response = owned.get(url, timeout=limits)
    except httpx.TimeoutException as exc:
        raise FetchError(f"timed out after {timeout}s", url=url) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"request failed: {exc}", url=url) from exc

    if not response.is_success:
        raise FetchError(
            f"unexpected status {response.status_code}",
            url=url,
            status_code=response.status_code,
        )
    text = response.text
    telemetry_metrics.emit("shaderspec.fetch.bytes", len(response.content))
    _LOGGER.info("fetched %d bytes from %s", len(response.content), url)
    return text
