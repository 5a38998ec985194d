"""Tag Cafe API client.

A thin wrapper around the cafe directory REST API, for scripts and
other services that want cafe data without dealing with HTTP
details.  The client uses the ``requests`` library internally.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is an empty value and ``error`` is a
dictionary with the keys ``status_code`` and ``message``.

* :meth:`list_cafes` – every stored cafe (no images).
* :meth:`get_cafe` – full details of one cafe, images base64 encoded.
* :meth:`search_cafes` – keyword search on name and address.
* :meth:`get_cafes_in_area` – map pins inside a latitude/longitude box.
* :meth:`filter_cafes` – map pins matching several tag/value pairs.
* :meth:`add_cafe`, :meth:`update_cafe_tags`, :meth:`get_cafe_tags`,
  :meth:`delete_cafe` – admin operations.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests


logger = logging.getLogger(__name__)


class CafeDirectoryAPI:
    """Client for interacting with the Tag Cafe API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``https://api.tagcafe.site``.
            timeout: Timeout in seconds for every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Any | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the API.

        Returns ``(data, None)`` with the parsed JSON body on success
        (``None`` for empty bodies) and ``(None, error)`` on failure.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
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
                    err_json = exc.response.json()
                    message = err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _request_list(self, path: str, params: Any | None = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    # ------------------------------------------------------------------
    # Public read operations
    # ------------------------------------------------------------------
    def list_cafes(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request_list("/cafes")

    def get_cafe(self, cafe_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("GET", f"/cafes/{cafe_id}")

    def search_cafes(self, query: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request_list("/cafes/search", params={"query": query})

    def get_cafes_in_area(
        self, min_lat: float, max_lat: float, min_lng: float, max_lng: float
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        params = {"minLat": min_lat, "maxLat": max_lat, "minLng": min_lng, "maxLng": max_lng}
        return self._request_list("/cafes/area", params=params)

    def filter_cafes(self, tags: Mapping[str, Optional[str]]) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return map pins for cafes matching every tag in ``tags``.

        ``tags`` maps tag names to levels, e.g. ``{"wifi": "AVAILABLE"}``.
        Tags mapped to ``None`` are sent as empty values and ignored by
        the server.
        """
        params = [("tagNames", name) for name in tags]
        params += [("values", value or "") for value in tags.values()]
        return self._request_list("/cafes/filter", params=params)

    def get_cafe_tags(self, cafe_id: int) -> Tuple[Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        return self._request("GET", f"/cafes/{cafe_id}/tags")

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------
    def add_cafe(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("POST", "/cafes", json_body=payload)

    def update_cafe_tags(
        self, cafe_id: int, tags: Dict[str, Optional[str]]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("PUT", f"/cafes/{cafe_id}/tags", json_body=tags)

    def delete_cafe(self, cafe_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/cafes/{cafe_id}")
        return error is None, error
