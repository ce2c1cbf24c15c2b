"""HTTP client for a Pretalx ``schedule.json`` export.

Provides :class:`ScheduleClient`, which fetches the whole export in one
request.  Every failure (transport, HTTP status, undecodable body) is
raised as a ``RuntimeError`` with a descriptive message; callers decide how
to degrade.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ScheduleClient:
    """Async HTTP client bound to one schedule export URL.

    Args:
        url: Absolute URL of the ``schedule.json`` export.
        timeout: Request timeout in seconds.
        transport: Optional ``httpx`` transport, used by tests to stub the
            remote end.

    Example::

        client = ScheduleClient("https://pretalx.com/democon/schedule/export/schedule.json")
        raw = await client.fetch_schedule()
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport
        self.headers: dict[str, str] = {"Accept": "application/json"}

    async def fetch_schedule(self) -> dict[str, Any]:
        """Fetch and decode the schedule export.

        Returns:
            The decoded JSON object.

        Raises:
            RuntimeError: If the request fails, the server answers with an
                error status, or the body is not a JSON object.
        """
        logger.debug("Fetching %s", self.url)
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.headers,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(self.url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                msg = f"Schedule request failed: {exc.response.status_code} for URL {exc.request.url}"
                raise RuntimeError(msg) from exc
            except httpx.RequestError as exc:
                msg = f"Schedule connection error for URL {self.url}: {exc}"
                raise RuntimeError(msg) from exc

        try:
            data = response.json()
        except ValueError as exc:
            msg = f"Schedule response from {self.url} is not valid JSON"
            raise RuntimeError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Schedule response from {self.url} is not a JSON object"
            raise RuntimeError(msg)
        return data
