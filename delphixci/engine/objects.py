from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError

from delphixci.errors import DelphixEngineError
from delphixci.json_types import JSONDict
from delphixci.json_types import JSONValue


class JobState(Enum):
    RUNNING = "RUNNING"
    SUSPENDED = "SUSPENDED"
    CANCELED = "CANCELED"
    FAILED = "FAILED"
    COMPLETED = "COMPLETED"


class ActionState(Enum):
    EXECUTING = "EXECUTING"
    WAITING = "WAITING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"


@dataclass(frozen=True)
class JobStatus:
    reference: str = ""
    status: JobState = JobState.RUNNING
    summary: str = ""
    title: str = ""
    target: None | str = None


@dataclass(frozen=True)
class ActionStatus:
    reference: str
    title: str
    state: ActionState
    details: str = ""


@dataclass(frozen=True)
class SelfServiceBookmark:
    reference: str
    name: str
    branch: None | str
    container: None | str
    template: None | str
    shared: bool
    timestamp: None | str


@dataclass(frozen=True)
class SelfServiceContainer:
    reference: str
    name: str
    active_branch: None | str
    template: None | str
    state: None | str


@dataclass(frozen=True)
class EngineActionResult:
    """What the engine answers to a POST: a result plus optional job and action references."""

    result: JSONValue
    job: None | str
    action: None | str


# The Json* models mirror the engine's payloads one to one (hence the camelCase).


class JsonJobEvent(BaseModel):
    messageDetails: None | str = None


class JsonJob(BaseModel):
    reference: str
    jobState: str
    title: None | str = None
    target: None | str = None
    events: list[JsonJobEvent] = []


class JsonAction(BaseModel):
    reference: str
    title: None | str = None
    state: str
    details: None | str = None


class JsonBookmark(BaseModel):
    reference: str
    name: str
    branch: None | str = None
    container: None | str = None
    template: None | str = None
    shared: bool = False
    timestamp: None | str = None


class JsonContainer(BaseModel):
    reference: str
    name: str
    activeBranch: None | str = None
    template: None | str = None
    state: None | str = None


M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], j: JSONDict, what: str) -> M:
    try:
        return model(**j)  # type: ignore
    except ValidationError as e:
        raise DelphixEngineError(f"engine sent an unexpected {what}: {e}") from e


def job_status_from_json(j: JSONDict) -> JobStatus:
    job = _parse(JsonJob, j, "job")
    summary = ""
    if job.events:
        last_details = job.events[-1].messageDetails
        summary = last_details if last_details is not None else ""
    try:
        state = JobState(job.jobState)
    except ValueError as e:
        raise DelphixEngineError(f"unknown job state {job.jobState}") from e
    return JobStatus(
        reference=job.reference,
        status=state,
        summary=summary,
        title=job.title if job.title is not None else "",
        target=job.target,
    )


def action_status_from_json(j: JSONDict) -> ActionStatus:
    action = _parse(JsonAction, j, "action")
    try:
        state = ActionState(action.state)
    except ValueError as e:
        raise DelphixEngineError(f"unknown action state {action.state}") from e
    return ActionStatus(
        reference=action.reference,
        title=action.title if action.title is not None else "",
        state=state,
        details=action.details if action.details is not None else "",
    )


def bookmark_from_json(j: JSONDict) -> SelfServiceBookmark:
    b = _parse(JsonBookmark, j, "bookmark")
    return SelfServiceBookmark(
        reference=b.reference,
        name=b.name,
        branch=b.branch,
        container=b.container,
        template=b.template,
        shared=b.shared,
        timestamp=b.timestamp,
    )


def container_from_json(j: JSONDict) -> SelfServiceContainer:
    c = _parse(JsonContainer, j, "container")
    return SelfServiceContainer(
        reference=c.reference,
        name=c.name,
        active_branch=c.activeBranch,
        template=c.template,
        state=c.state,
    )
