"""Overpass API client: one POST exchange per search."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from requests import Session

from ..config import OVERPASS_URL, REQUEST_TIMEOUT
from ..errors import OverpassAPIError
from .session import get_default_session

LOGGER = logging.getLogger(__name__)

RawElement = Dict[str, Any]


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text excerpt of an error body."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


class OverpassClient:
    """Thin wrapper around the Overpass interpreter endpoint."""

    def __init__(
        self,
        url: str = OVERPASS_URL,
        *,
        session: Optional[Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = get_default_session()
        return self._session

    def fetch_elements(self, query: str) -> List[RawElement]:
        """POST ``query`` and return the response's ``elements`` list.

        Raises:
            OverpassAPIError: On transport errors, non-success status codes or
                a response body that is not the expected JSON document.
        """

        LOGGER.debug("POST %s query_bytes=%d", self.url, len(query))
        try:
            response = self.session.post(
                self.url,
                data=query.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise OverpassAPIError(f"Overpass request failed: {exc}") from exc

        status = response.status_code
        if not 200 <= status < 300:
            detail = _extract_error_text(response)
            message = f"Overpass API error: {status}"
            if detail:
                message = f"{message} | {detail}"
            raise OverpassAPIError(message, status_code=status)

        try:
            payload = response.json()
        except ValueError as exc:
            raise OverpassAPIError(
                f"Overpass returned invalid JSON: {exc}", status_code=status
            ) from exc

        if not isinstance(payload, dict):
            raise OverpassAPIError(
                f"Unexpected Overpass payload type: {type(payload).__name__}",
                status_code=status,
            )
        elements = payload.get("elements")
        if not isinstance(elements, list):
            message = "Overpass payload has no elements list"
            remark = payload.get("remark")
            if remark:
                message = f"{message} | {remark}"
            raise OverpassAPIError(message, status_code=status)
        LOGGER.debug("Overpass returned %d elements", len(elements))
        return [element for element in elements if isinstance(element, dict)]


__all__ = ["OverpassClient"]
