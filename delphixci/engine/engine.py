import threading
from typing import Any
from typing import Callable
from typing import Final

import requests
import structlog

from delphixci.config import EngineConfig
from delphixci.config import UserConfig
from delphixci.engine.objects import ActionStatus
from delphixci.engine.objects import EngineActionResult
from delphixci.engine.objects import JobState
from delphixci.engine.objects import JobStatus
from delphixci.engine.objects import action_status_from_json
from delphixci.engine.objects import job_status_from_json
from delphixci.errors import DelphixEngineError
from delphixci.errors import EngineConnectionError
from delphixci.http import HttpWrapper
from delphixci.http import JsonResponse
from delphixci.http import RequestsHttpWrapper
from delphixci.json_types import JSONDict
from delphixci.json_types import JSONValue
from delphixci.json_types import optional_string
from delphixci.polling import wait_for_completion

PATH_SESSION: Final = "/resources/json/delphix/session"
PATH_LOGIN: Final = "/resources/json/delphix/login"
PATH_JOB: Final = "/resources/json/delphix/job"
PATH_ACTION: Final = "/resources/json/delphix/action"

FIELD_RESULT: Final = "result"
FIELD_STATUS: Final = "status"
FIELD_JOB: Final = "job"
FIELD_ACTION: Final = "action"
STATUS_ERROR: Final = "ERROR"

API_VERSION_MAJOR: Final = 1
API_VERSION_MINOR: Final = 10
API_VERSION_MICRO: Final = 0

ENGINE_POLL_INTERVAL_SECONDS: Final = 1.0

logger = structlog.stdlib.get_logger(__name__)


def _error_message(body: JSONDict) -> str:
    error = body.get("error")
    if not isinstance(error, dict):
        return f"engine reported an error without details: {body}"
    details = error.get("details", "unknown error")
    action = error.get("action")
    if isinstance(action, str) and action:
        return f"{details} {action}"
    return str(details)


class DelphixEngine:
    """Session against the legacy JSON API of a single Delphix Engine."""

    def __init__(
        self,
        address: str,
        username: str,
        password: str,
        use_https: bool = True,
        request_wrapper: None | HttpWrapper = None,
        poll_interval_seconds: float = ENGINE_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.address = address
        self.username = username
        self._password = password
        self._use_https = use_https
        self.poll_interval_seconds = poll_interval_seconds
        self._request_wrapper = (
            request_wrapper if request_wrapper is not None else RequestsHttpWrapper()
        )

    @staticmethod
    def from_config(config: EngineConfig) -> "DelphixEngine":
        return DelphixEngine(
            address=config.address,
            username=config.username,
            password=config.password,
            use_https=config.use_https,
            request_wrapper=RequestsHttpWrapper(verify_ssl=config.verify_ssl),
        )

    @property
    def base_url(self) -> str:
        if self.address.startswith(("http://", "https://")):
            return self.address.rstrip("/")
        return f"{'https' if self._use_https else 'http'}://{self.address}"

    def _headers(self) -> dict[str, Any]:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def _handle_response(self, path: str, response: JsonResponse) -> JSONDict:
        body = response.body
        if body.get(FIELD_STATUS) == STATUS_ERROR:
            raise DelphixEngineError(_error_message(body))
        if response.status_code >= 400:
            raise DelphixEngineError(
                f"engine responded to {path} with HTTP {response.status_code}"
            )
        return body

    def engine_get(self, path: str) -> JSONDict:
        try:
            response = self._request_wrapper.get(
                f"{self.base_url}{path}", headers=self._headers()
            )
        except requests.RequestException as e:
            raise EngineConnectionError(self.address) from e
        return self._handle_response(path, response)

    def engine_post(self, path: str, body: JSONDict) -> JSONDict:
        try:
            response = self._request_wrapper.post(
                f"{self.base_url}{path}", headers=self._headers(), data=body
            )
        except requests.RequestException as e:
            raise EngineConnectionError(self.address) from e
        return self._handle_response(path, response)

    def engine_get_result(self, path: str) -> JSONValue:
        return self.engine_get(path).get(FIELD_RESULT)

    def engine_post_action(self, path: str, body: JSONDict) -> EngineActionResult:
        response = self.engine_post(path, body)
        return EngineActionResult(
            result=response.get(FIELD_RESULT),
            job=optional_string(response, FIELD_JOB),
            action=optional_string(response, FIELD_ACTION),
        )

    def login(self) -> None:
        self.engine_post(
            PATH_SESSION,
            {
                "type": "APISession",
                "version": {
                    "type": "APIVersion",
                    "major": API_VERSION_MAJOR,
                    "minor": API_VERSION_MINOR,
                    "micro": API_VERSION_MICRO,
                },
            },
        )
        self.engine_post(
            PATH_LOGIN,
            {
                "type": "LoginRequest",
                "username": self.username,
                "password": self._password,
                "target": "DOMAIN",
            },
        )
        logger.info(f"logged in to {self.address} as {self.username}")

    def get_job_status(self, job_ref: str) -> JobStatus:
        result = self.engine_get_result(f"{PATH_JOB}/{job_ref}")
        if not isinstance(result, dict):
            raise DelphixEngineError(f"job {job_ref} has no result: {result}")
        return job_status_from_json(result)

    def get_action_status(self, action_ref: str) -> ActionStatus:
        result = self.engine_get_result(f"{PATH_ACTION}/{action_ref}")
        if not isinstance(result, dict):
            raise DelphixEngineError(f"action {action_ref} has no result: {result}")
        return action_status_from_json(result)

    def wait_for_job(
        self,
        job_ref: str,
        build_log: structlog.stdlib.BoundLogger,
        stop_event: None | threading.Event = None,
        interval_seconds: None | float = None,
    ) -> None | JobStatus:
        last_summary = ""

        def report(status: JobStatus) -> None:
            nonlocal last_summary
            # Only report the summary when it has changed on the engine
            if status.summary != last_summary:
                build_log.info(status.summary)
                last_summary = status.summary

        def report_error(e: Exception) -> None:
            build_log.error(getattr(e, "message", str(e)))

        return wait_for_completion(
            fetch=lambda: self.get_job_status(job_ref),
            is_running=lambda s: s.status == JobState.RUNNING,
            interval_seconds=(
                interval_seconds
                if interval_seconds is not None
                else self.poll_interval_seconds
            ),
            stop_event=stop_event,
            on_status=report,
            retry_on=(DelphixEngineError, EngineConnectionError),
            on_error=report_error,
            log=build_log,
        )


EngineResolver = Callable[[str], None | DelphixEngine]


def engine_resolver(config: UserConfig) -> EngineResolver:
    def resolve(name: str) -> None | DelphixEngine:
        engine_config = config.engine(name)
        if engine_config is None:
            return None
        return DelphixEngine.from_config(engine_config)

    return resolve
