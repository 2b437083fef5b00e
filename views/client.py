import logging

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The API answered with ``success: false`` or with something that is not an envelope."""

    def __init__(self, message: str, status_code: int | None = None, body: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}


class ApiClient:
    """Thin JSON client over an ``httpx.Client`` that unwraps the response envelope."""

    def __init__(self, http: httpx.Client):
        self.http = http

    def request(self, method: str, path: str, params: dict | None = None, json: dict | None = None) -> dict:
        response = self.http.request(method, path, params=params, json=json)
        try:
            body = response.json()
        except ValueError:
            raise ApiError(f"{method} {path} returned a non-JSON body", response.status_code)

        if not isinstance(body, dict) or not body.get("success"):
            body = body if isinstance(body, dict) else {}
            message = body.get("message") or body.get("error") or "Request failed"
            raise ApiError(message, response.status_code, body)
        return body

    def get(self, path: str, **params) -> dict:
        return self.request("GET", path, params=params or None)

    def post(self, path: str, json: dict, **params) -> dict:
        return self.request("POST", path, params=params or None, json=json)

    def put(self, path: str, json: dict, **params) -> dict:
        return self.request("PUT", path, params=params or None, json=json)

    def delete(self, path: str, **params) -> dict:
        return self.request("DELETE", path, params=params or None)
