import threading
from typing import Any
from typing import Final
from typing import TypeVar

import requests
import structlog
from pydantic import BaseModel
from pydantic import ValidationError

from delphixci.config import UserConfig
from delphixci.dct.models import DctJob
from delphixci.dct.models import DeleteVdbParameters
from delphixci.dct.models import DeleteVdbResponse
from delphixci.dct.models import ProvisionVdbBySnapshotParameters
from delphixci.dct.models import ProvisionVdbFromBookmarkParameters
from delphixci.dct.models import ProvisionVdbResponse
from delphixci.errors import DctApiError
from delphixci.errors import EngineConnectionError
from delphixci.http import HttpWrapper
from delphixci.http import JsonResponse
from delphixci.http import RequestsHttpWrapper
from delphixci.json_types import JSONDict
from delphixci.messages import MISSING_DCT_CONFIGURATION
from delphixci.messages import missing_credentials
from delphixci.polling import wait_for_completion

# DCT reports jobs as STARTED while they run; the other three are queued states
DCT_RUNNING_STATES: Final = frozenset({"PENDING", "STARTED", "RUNNING", "WAITING"})
DCT_COMPLETED_STATE: Final = "COMPLETED"
DCT_POLL_INTERVAL_SECONDS: Final = 20.0

logger = structlog.stdlib.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], body: JSONDict) -> M:
    try:
        return model(**body)  # type: ignore
    except ValidationError as e:
        raise DctApiError(None, f"{dict(body)} ({e})") from e


class DctClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        request_wrapper: HttpWrapper,
        poll_interval_seconds: float = DCT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._request_wrapper = request_wrapper
        self.poll_interval_seconds = poll_interval_seconds

    def _headers(self) -> dict[str, Any]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"apk {self._api_key}",
        }

    def _check(self, response: JsonResponse) -> JSONDict:
        if response.status_code >= 400:
            raise DctApiError(response.status_code, str(dict(response.body)))
        return response.body

    def _post(self, path: str, data: JSONDict) -> JSONDict:
        try:
            response = self._request_wrapper.post(
                f"{self.base_url}{path}", headers=self._headers(), data=data
            )
        except requests.RequestException as e:
            raise EngineConnectionError(self.base_url) from e
        return self._check(response)

    def _get(self, path: str) -> JSONDict:
        try:
            response = self._request_wrapper.get(
                f"{self.base_url}{path}", headers=self._headers()
            )
        except requests.RequestException as e:
            raise EngineConnectionError(self.base_url) from e
        return self._check(response)

    def provision_vdb_from_bookmark(
        self, parameters: ProvisionVdbFromBookmarkParameters
    ) -> ProvisionVdbResponse:
        response = self._post(
            "/vdbs/provision_from_bookmark", parameters.model_dump(exclude_none=True)
        )
        return _parse(ProvisionVdbResponse, response)

    def provision_vdb_by_snapshot(
        self, parameters: ProvisionVdbBySnapshotParameters
    ) -> ProvisionVdbResponse:
        response = self._post(
            "/vdbs/provision_by_snapshot", parameters.model_dump(exclude_none=True)
        )
        return _parse(ProvisionVdbResponse, response)

    def delete_vdb(self, vdb_id: str, force: bool) -> DeleteVdbResponse:
        response = self._post(
            f"/vdbs/{vdb_id}/delete", DeleteVdbParameters(force=force).model_dump()
        )
        logger.info(f"delete of VDB {vdb_id} answered with {dict(response)}")
        return _parse(DeleteVdbResponse, response)

    def get_job_by_id(self, job_id: str) -> DctJob:
        return _parse(DctJob, self._get(f"/jobs/{job_id}"))

    def wait_for_job(
        self,
        job_id: str,
        build_log: structlog.stdlib.BoundLogger,
        stop_event: None | threading.Event = None,
    ) -> None | str:
        def report(job: DctJob) -> None:
            build_log.info(f"Current Job Status: {job.status}")

        job = wait_for_completion(
            fetch=lambda: self.get_job_by_id(job_id),
            is_running=lambda j: j.status in DCT_RUNNING_STATES,
            interval_seconds=self.poll_interval_seconds,
            stop_event=stop_event,
            on_status=report,
            log=build_log,
        )
        return job.status if job is not None else None


def create_dct_client(
    config: UserConfig,
    credential_id: str,
    build_log: structlog.stdlib.BoundLogger,
) -> None | DctClient:
    if config.dct is None:
        build_log.error(MISSING_DCT_CONFIGURATION)
        return None
    api_key = config.api_key(credential_id)
    if api_key is None:
        build_log.error(missing_credentials(credential_id))
        return None
    return DctClient(
        base_url=config.dct.url,
        api_key=api_key,
        request_wrapper=RequestsHttpWrapper(verify_ssl=config.dct.verify_ssl),
    )
