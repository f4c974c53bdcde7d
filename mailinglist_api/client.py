"""Mailing list API client.

A thin wrapper around the JSON API served by ``mailinglist_api.app``.
Every endpoint takes a JSON body, including the two ``GET`` routes, so
the client always sends ``json=`` rather than query parameters.

The client exposes one method per endpoint:

* :meth:`create_email` – add a new subscriber.
* :meth:`get_email` – look a subscriber up by address.
* :meth:`update_email` – create or replace a subscriber's state.
* :meth:`delete_email` – opt a subscriber out.
* :meth:`get_email_batch` – list one page of active subscribers.

Each method returns a tuple ``(data, error)`` instead of raising, so
callers such as scripts can report failures without a try block.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class MailingListClient:
    """Client for the mailing list JSON API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://127.0.0.1:8080``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json_body: Dict[str, Any]) -> Result:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``.  ``data`` contains the parsed JSON
            response on success and ``error`` is ``None``.  On failure,
            ``data`` is ``None`` and ``error`` is a dictionary with keys
            ``status_code`` and ``message``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("Err") or ""
                except (ValueError, AttributeError):
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def create_email(self, email: str) -> Result:
        return self._request("POST", "/email/create", {"Email": email})

    def get_email(self, email: str) -> Result:
        """Return the subscriber record, or ``(None, None)`` when unknown."""
        return self._request("GET", "/email/get", {"Email": email})

    def update_email(
        self,
        email: str,
        *,
        confirmed_at: Optional[datetime] = None,
        opt_out: bool = False,
    ) -> Result:
        """Create or replace a subscriber.

        ``confirmed_at`` is sent as an ISO 8601 string; leaving it out
        stores the subscriber as never confirmed.
        """
        body: Dict[str, Any] = {"Email": email, "OptOut": opt_out}
        if confirmed_at is not None:
            body["ConfirmedAt"] = confirmed_at.isoformat()
        return self._request("PUT", "/email/update", body)

    def delete_email(self, email: str) -> Result:
        return self._request("POST", "/email/delete", {"Email": email})

    def get_email_batch(self, page: int, count: int) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return one page of active subscribers.

        Returns:
            A tuple ``(entries, error)``.  ``entries`` is an empty list
            when the request failed.
        """
        data, error = self._request("GET", "/email/get_batch", {"Page": page, "Count": count})
        return data or [], error
