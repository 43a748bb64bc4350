# frontend/api.py
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import requests
from dotenv import load_dotenv

proj_root = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=proj_root / ".env")

log = logging.getLogger(__name__)

BACKEND = os.getenv("BACKEND_URL") or os.getenv("BACKEND") or "http://127.0.0.1:8000"

GENERIC_ERROR = "An unexpected error occurred."


def to_abs(url: str) -> str:
    """
    If the API returned an absolute URL (starts with http), use it as-is.
    If it returned a relative path like /static/..., prefix BACKEND once.
    """
    if not url:
        return url
    if url.startswith("http") or url.startswith("data:"):
        return url
    base = BACKEND.rstrip("/")
    return f"{base}/{url.lstrip('/')}" if base else url


def _headers(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


def _request(method: str, path: str, token: Optional[str] = None, timeout: int = 30,
             headers: Optional[Dict[str, str]] = None, **kwargs) -> Optional[requests.Response]:
    try:
        return requests.request(method, BACKEND.rstrip("/") + path, headers={**(headers or {}), **_headers(token)},
                                timeout=timeout, **kwargs)
    except requests.RequestException as e:
        log.error("Error contacting backend (%s %s): %s", method, path, e)
        return None


def api_get(path: str, params: dict = None, token: str = None, timeout: int = 20, headers: dict = None) -> Optional[requests.Response]:
    return _request("GET", path, token=token, params=params, timeout=timeout, headers=headers)


def api_post(path: str, data: dict = None, json: dict = None, files=None, token: str = None, timeout: int = 30) -> Optional[requests.Response]:
    return _request("POST", path, token=token, data=data, json=json, files=files, timeout=timeout)


def api_put(path: str, data: dict = None, files=None, token: str = None, timeout: int = 30) -> Optional[requests.Response]:
    return _request("PUT", path, token=token, data=data, files=files, timeout=timeout)


def api_delete(path: str, token: str = None, timeout: int = 20) -> Optional[requests.Response]:
    return _request("DELETE", path, token=token, timeout=timeout)


FORWARDED_HEADERS = ("Accept-Language", "X-Forwarded-For")


def forwarded_headers(browser_headers) -> Dict[str, str]:
    """Browser headers the backend needs to detect the visitor's language."""
    out = {}
    for name in FORWARDED_HEADERS:
        value = (browser_headers or {}).get(name)
        if value:
            out[name] = value
    return out


def error_message(resp: Optional[requests.Response]) -> str:
    """Turn a failed response into one user-facing line."""
    if resp is None:
        return "Error contacting backend. Please try again."
    try:
        detail = resp.json().get("detail")
    except ValueError:
        return GENERIC_ERROR
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail:
        first = detail[0]
        field = ".".join(str(p) for p in first.get("loc", [])[1:])
        return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return GENERIC_ERROR


def load_catalog() -> Tuple[List[dict], List[dict]]:
    """Fetch products and artisans in parallel. Raises RuntimeError if either fails."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        products_future = pool.submit(api_get, "/products")
        artisans_future = pool.submit(api_get, "/artisans")
        products_resp = products_future.result()
        artisans_resp = artisans_future.result()

    for resp in (products_resp, artisans_resp):
        if resp is None or not resp.ok:
            raise RuntimeError(error_message(resp))
    return products_resp.json(), artisans_resp.json()
