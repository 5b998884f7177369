from dataclasses import dataclass
from typing import Any
from typing import Final

import requests
import structlog

from delphixci.json_types import JSONDict

DEFAULT_TIMEOUT_SECONDS: Final = 60.0

logger = structlog.stdlib.get_logger(__name__)


@dataclass(frozen=True)
class JsonResponse:
    status_code: int
    body: JSONDict


class HttpWrapper:
    # Transport failures surface as requests.RequestException; callers translate them.
    def post(self, url: str, headers: dict[str, Any], data: JSONDict) -> JsonResponse: ...

    def get(self, url: str, headers: dict[str, Any]) -> JsonResponse: ...


def _to_json_response(response: requests.Response) -> JsonResponse:
    if not response.content:
        return JsonResponse(status_code=response.status_code, body={})
    # requests.JSONDecodeError is a RequestException, so bad payloads look like transport errors
    body = response.json()
    if not isinstance(body, dict):
        body = {"result": body}
    return JsonResponse(status_code=response.status_code, body=body)


class RequestsHttpWrapper(HttpWrapper):
    """Keeps one requests session (and thus the engine's session cookie) per wrapper."""

    def __init__(
        self,
        verify_ssl: bool = True,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._session = requests.Session()
        self._session.verify = verify_ssl
        self._timeout_seconds = timeout_seconds

    def post(self, url: str, headers: dict[str, Any], data: JSONDict) -> JsonResponse:
        logger.debug(f"POST {url}")
        return _to_json_response(
            self._session.post(
                url, headers=headers, json=data, timeout=self._timeout_seconds
            )
        )

    def get(self, url: str, headers: dict[str, Any]) -> JsonResponse:
        logger.debug(f"GET {url}")
        return _to_json_response(
            self._session.get(url, headers=headers, timeout=self._timeout_seconds)
        )
