"""
Shared HTTP helpers for the catalog, favorites and profile APIs.

Body parsing follows what the mobile client did: JSON when the content
type says so, otherwise try to parse the text, otherwise keep the raw text
as {"raw": text}.
"""
import json
import logging
from typing import Any, Iterable, Optional, Tuple, Type

import requests

from .errors import MalformedResponseError, NetworkError, UpstreamError

logger = logging.getLogger(__name__)


def send(
    session: requests.Session,
    method: str,
    url: str,
    *,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a request, wrapping transport failures into NetworkError."""
    if timeout is not None:
        kwargs["timeout"] = timeout
    try:
        return session.request(method, url, **kwargs)
    except requests.RequestException as e:
        logger.warning(f"{method} {url} failed: {e}")
        raise NetworkError(str(e)) from e


def parse_body(resp: requests.Response) -> Tuple[Any, bool]:
    """
    Return (body, structured). When the body is not JSON the result is
    ({"raw": text}, False).
    """
    content_type = resp.headers.get("content-type", "") or ""
    if "application/json" in content_type:
        try:
            return resp.json(), True
        except ValueError:
            pass
    text = resp.text or ""
    try:
        return json.loads(text), True
    except ValueError:
        return {"raw": text}, False


def error_message(body: Any) -> str:
    """Best-effort message from an error payload."""
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("status")
        if message:
            return str(message)
        if "raw" in body and len(body) == 1:
            return str(body["raw"])
    return json.dumps(body, ensure_ascii=False)


def check_response(
    resp: requests.Response,
    *,
    ok_statuses: Iterable[int] = (),
    error_cls: Type[UpstreamError] = UpstreamError,
    expect_body: bool = True,
) -> Any:
    """
    Return the parsed body of a successful response.

    Statuses listed in ok_statuses count as success even when not 2xx
    (e.g. 409 on an idempotent create). Raises error_cls for any other
    failure and MalformedResponseError when a success has no structured body.
    With expect_body=False only the status is checked (mutations).
    """
    body, structured = parse_body(resp)
    if not resp.ok and resp.status_code not in ok_statuses:
        raise error_cls(resp.status_code, error_message(body))
    if expect_body and not structured and (resp.text or "").strip():
        raise MalformedResponseError(resp.status_code, f"Unparsable body: {resp.text[:200]}")
    return body if structured else {}
