import threading
from dataclasses import dataclass
from typing import Callable

import structlog

from delphixci.config import UserConfig
from delphixci.dct.client import DCT_COMPLETED_STATE
from delphixci.dct.client import DctClient
from delphixci.dct.client import create_dct_client
from delphixci.dct.models import DctJob
from delphixci.dct.models import ProvisionVdbBySnapshotParameters
from delphixci.dct.models import ProvisionVdbFromBookmarkParameters
from delphixci.dct.models import ProvisionVdbResponse
from delphixci.errors import DctApiError
from delphixci.errors import DelphixEngineError
from delphixci.errors import EngineConnectionError
from delphixci.steps.operations import ProvisionType
from delphixci.steps.operations import parse_operation
from delphixci.steps.step_result import StepResult
from delphixci.steps.step_result import failed_step

DctClientFactory = Callable[
    [UserConfig, str, structlog.stdlib.BoundLogger], None | DctClient
]


def _follow_dct_job(
    client: DctClient,
    job: None | DctJob,
    skip_polling: bool,
    build_log: structlog.stdlib.BoundLogger,
    published: dict[str, str],
    stop_event: None | threading.Event,
) -> StepResult:
    if job is None:
        build_log.error("DCT didn't return a job for this request")
        return failed_step(published)
    published = published | {"JOB_ID": job.id}
    if skip_polling:
        build_log.info(f"not waiting for job {job.id} (status {job.status})")
        return StepResult(succeeded=True, status=job.status, published=published)
    try:
        status = client.wait_for_job(job.id, build_log, stop_event=stop_event)
    except (DctApiError, EngineConnectionError) as e:
        build_log.error(e.message)
        return failed_step(published)
    if status != DCT_COMPLETED_STATE:
        build_log.error(f"job {job.id} ended with status {status}")
    return StepResult(
        succeeded=status == DCT_COMPLETED_STATE, status=status, published=published
    )


@dataclass(frozen=True)
class ProvisionVdbStep:
    credential_id: str
    provision_type: str
    bookmark_id: None | str = None
    source_data_id: None | str = None
    snapshot_id: None | str = None
    engine_id: None | str = None
    name: None | str = None
    database_name: None | str = None
    environment_id: None | str = None
    repository_id: None | str = None
    target_group_id: None | str = None
    auto_select_repository: bool = True
    skip_polling: bool = False

    def _provision(
        self, client: DctClient, provision_type: ProvisionType
    ) -> ProvisionVdbResponse:
        match provision_type:
            case ProvisionType.BOOKMARK:
                if not self.bookmark_id:
                    raise DelphixEngineError(
                        "provisioning from a bookmark needs a bookmark ID"
                    )
                return client.provision_vdb_from_bookmark(
                    ProvisionVdbFromBookmarkParameters(
                        bookmark_id=self.bookmark_id,
                        name=self.name,
                        database_name=self.database_name,
                        environment_id=self.environment_id,
                        repository_id=self.repository_id,
                        target_group_id=self.target_group_id,
                        auto_select_repository=self.auto_select_repository,
                    )
                )
            case ProvisionType.SNAPSHOT:
                if not self.source_data_id:
                    raise DelphixEngineError(
                        "provisioning by snapshot needs a source data ID"
                    )
                return client.provision_vdb_by_snapshot(
                    ProvisionVdbBySnapshotParameters(
                        source_data_id=self.source_data_id,
                        snapshot_id=self.snapshot_id,
                        engine_id=self.engine_id,
                        name=self.name,
                        database_name=self.database_name,
                        environment_id=self.environment_id,
                        repository_id=self.repository_id,
                        target_group_id=self.target_group_id,
                        auto_select_repository=self.auto_select_repository,
                    )
                )

    def perform(
        self,
        config: UserConfig,
        build_log: structlog.stdlib.BoundLogger,
        client_factory: DctClientFactory = create_dct_client,
        stop_event: None | threading.Event = None,
    ) -> StepResult:
        client = client_factory(config, self.credential_id, build_log)
        if client is None:
            return failed_step()
        try:
            provision_type = parse_operation(
                ProvisionType, self.provision_type, "VDB Provisioning"
            )
            response = self._provision(client, provision_type)
        except (DelphixEngineError, DctApiError, EngineConnectionError) as e:
            build_log.error(e.message)
            return failed_step()

        build_log.info(
            f"provisioning VDB {response.vdb_id}, job {response.job.id if response.job is not None else None}"
        )
        published = {"VDB_ID": response.vdb_id} if response.vdb_id is not None else {}
        return _follow_dct_job(
            client, response.job, self.skip_polling, build_log, published, stop_event
        )


@dataclass(frozen=True)
class DeleteVdbStep:
    credential_id: str
    vdb_id: str
    force: bool = False
    skip_polling: bool = False

    def perform(
        self,
        config: UserConfig,
        build_log: structlog.stdlib.BoundLogger,
        client_factory: DctClientFactory = create_dct_client,
        stop_event: None | threading.Event = None,
    ) -> StepResult:
        client = client_factory(config, self.credential_id, build_log)
        if client is None:
            return failed_step()
        try:
            response = client.delete_vdb(self.vdb_id, self.force)
        except (DctApiError, EngineConnectionError) as e:
            build_log.error(e.message)
            return failed_step()

        build_log.info(f"deleting VDB {self.vdb_id}")
        return _follow_dct_job(
            client,
            response.job,
            self.skip_polling,
            build_log,
            {"VDB_ID": self.vdb_id},
            stop_event,
        )
