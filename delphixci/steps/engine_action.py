import threading

import structlog

from delphixci.engine.engine import DelphixEngine
from delphixci.engine.objects import ActionState
from delphixci.engine.objects import EngineActionResult
from delphixci.engine.objects import JobState
from delphixci.errors import DelphixEngineError
from delphixci.errors import EngineConnectionError
from delphixci.steps.step_result import StepResult
from delphixci.steps.step_result import failed_step


def follow_engine_action(
    engine: DelphixEngine,
    action: EngineActionResult,
    build_log: structlog.stdlib.BoundLogger,
    published: dict[str, str],
    stop_event: None | threading.Event = None,
) -> StepResult:
    """Report on what an engine operation kicked off.

    Some operations finish synchronously, in which case the action is already
    COMPLETED and there's nothing to wait for. Otherwise the engine hands us a
    job, which we follow until it's done.
    """
    if action.action is not None:
        try:
            action_status = engine.get_action_status(action.action)
            if action_status.state == ActionState.COMPLETED:
                build_log.info(f"{action_status.title}: {action_status.state.value}")
                return StepResult(
                    succeeded=True,
                    status=action_status.state.value,
                    published=published,
                )
        except DelphixEngineError as e:
            build_log.error(e.message)
        except EngineConnectionError as e:
            build_log.error(e.message)

    if action.job is None:
        build_log.error("engine returned neither a completed action nor a job")
        return failed_step(published)

    # Make the job available to whoever cleans up after the build
    published = published | {"DELPHIX_JOB": action.job}

    job_status = engine.wait_for_job(action.job, build_log, stop_event=stop_event)
    if job_status is None:
        return failed_step(published)
    return StepResult(
        succeeded=job_status.status == JobState.COMPLETED,
        status=job_status.status.value,
        published=published,
    )
