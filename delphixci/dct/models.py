from pydantic import BaseModel
from pydantic import ConfigDict


class DctJob(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    status: None | str = None
    type: None | str = None
    error_details: None | str = None
    target_id: None | str = None


class ProvisionVdbResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    vdb_id: None | str = None
    job: None | DctJob = None


class DeleteVdbResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    job: None | DctJob = None


class ProvisionVdbFromBookmarkParameters(BaseModel):
    bookmark_id: str
    name: None | str = None
    database_name: None | str = None
    environment_id: None | str = None
    repository_id: None | str = None
    target_group_id: None | str = None
    auto_select_repository: None | bool = None


class ProvisionVdbBySnapshotParameters(BaseModel):
    source_data_id: str
    snapshot_id: None | str = None
    engine_id: None | str = None
    name: None | str = None
    database_name: None | str = None
    environment_id: None | str = None
    repository_id: None | str = None
    target_group_id: None | str = None
    auto_select_repository: None | bool = None


class DeleteVdbParameters(BaseModel):
    force: bool = False
