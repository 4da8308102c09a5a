from typing import Any, Dict, Optional

import requests

from utils.env import API_BASE_URL, API_TIMEOUT, API_TOKEN


class ApiError(requests.HTTPError):
    """Non-2xx answer from the simulation service with its JSON error body decoded."""

    def __init__(self, status_code: int, body: Dict[str, Any], response=None):
        message = body.get("message") or body.get("detail") or f"HTTP {status_code}"
        super().__init__(str(message), response=response)
        self.status_code = status_code
        self.body = body

    @property
    def code(self) -> Optional[str]:
        return self.body.get("code")


def make_headers(token: Optional[str] = None, *, json_body: bool = True) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if json_body:
        headers["Content-Type"] = "application/json; charset=utf-8"
    return headers


def api_url(path: str, base_url: Optional[str] = None) -> str:
    if not path.startswith("/"):
        path = "/" + path
    return (base_url or API_BASE_URL).rstrip("/") + path


def _error_body(resp) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _send(resp) -> Any:
    try:
        resp.raise_for_status()
    except requests.HTTPError as e:
        # 5xx bodies are not ours to interpret
        if resp.status_code >= 500:
            raise
        raise ApiError(resp.status_code, _error_body(resp), response=resp) from e
    if not resp.text.strip():
        return None
    return resp.json()


def get_json(
    url: str,
    *,
    token: Optional[str] = API_TOKEN,
    params: Optional[Dict[str, Any]] = None,
    timeout: int = API_TIMEOUT,
) -> Any:
    return _send(requests.get(url, headers=make_headers(token, json_body=False), params=params, timeout=timeout))


def post_json(
    url: str,
    *,
    token: Optional[str] = API_TOKEN,
    json_body: Optional[Dict[str, Any]] = None,
    timeout: int = API_TIMEOUT,
) -> Any:
    return _send(requests.post(url, headers=make_headers(token), json=json_body, timeout=timeout))
