import threading
from dataclasses import dataclass

import structlog

from delphixci.engine.container_repository import SelfServiceRepository
from delphixci.engine.engine import EngineResolver
from delphixci.engine.objects import EngineActionResult
from delphixci.errors import DelphixEngineError
from delphixci.errors import EngineConnectionError
from delphixci.messages import INVALID_ENGINE_ENVIRONMENT
from delphixci.steps.engine_action import follow_engine_action
from delphixci.steps.operations import NULL_SELECTION
from delphixci.steps.operations import ContainerOperation
from delphixci.steps.operations import parse_operation
from delphixci.steps.step_result import StepResult
from delphixci.steps.step_result import failed_step


@dataclass(frozen=True)
class SelfServiceContainerStep:
    delphix_engine: str
    delphix_container: str
    delphix_operation: str
    delphix_bookmark: str = NULL_SELECTION

    def _run_operation(
        self, operation: ContainerOperation, containers: SelfServiceRepository
    ) -> EngineActionResult:
        match operation:
            case ContainerOperation.REFRESH:
                return containers.refresh(self.delphix_container)
            case ContainerOperation.RESET:
                return containers.reset(self.delphix_container)
            case ContainerOperation.RESTORE:
                if self.delphix_bookmark == NULL_SELECTION:
                    raise DelphixEngineError(
                        "restoring a container needs a bookmark to restore from"
                    )
                return containers.restore(self.delphix_container, self.delphix_bookmark)
            case ContainerOperation.UNDO:
                return containers.undo(self.delphix_container)
            case ContainerOperation.ENABLE:
                return containers.enable(self.delphix_container)
            case ContainerOperation.DISABLE:
                return containers.disable(self.delphix_container)

    def perform(
        self,
        resolve_engine: EngineResolver,
        build_log: structlog.stdlib.BoundLogger,
        stop_event: None | threading.Event = None,
    ) -> StepResult:
        if self.delphix_container == NULL_SELECTION:
            build_log.error(INVALID_ENGINE_ENVIRONMENT)
            return failed_step()
        engine = resolve_engine(self.delphix_engine)
        if engine is None:
            build_log.error(INVALID_ENGINE_ENVIRONMENT)
            return failed_step()

        containers = SelfServiceRepository(engine)
        try:
            operation = parse_operation(
                ContainerOperation, self.delphix_operation, "Self Service Container"
            )
            engine.login()
            action = self._run_operation(operation, containers)
        except DelphixEngineError as e:
            build_log.error(e.message)
            return failed_step()
        except EngineConnectionError as e:
            build_log.error(e.message)
            return failed_step()

        return follow_engine_action(
            engine,
            action,
            build_log,
            {
                "DELPHIX_ENGINE": self.delphix_engine,
                "DELPHIX_CONTAINER": self.delphix_container,
            },
            stop_event=stop_event,
        )
