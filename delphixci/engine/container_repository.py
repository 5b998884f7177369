from typing import Final

from delphixci.engine.engine import DelphixEngine
from delphixci.engine.objects import EngineActionResult
from delphixci.engine.objects import SelfServiceContainer
from delphixci.engine.objects import container_from_json
from delphixci.errors import DelphixEngineError
from delphixci.json_types import JSONArray

PATH_ROOT: Final = "/resources/json/delphix/jetstream/container"


class SelfServiceRepository:
    """Self Service data containers on a single engine."""

    def __init__(self, engine: DelphixEngine) -> None:
        self.engine = engine

    def list(self) -> JSONArray:
        result = self.engine.engine_get_result(PATH_ROOT)
        if not isinstance(result, list):
            raise DelphixEngineError(f"expected a list of containers, got {result}")
        return result

    def list_containers(self) -> dict[str, SelfServiceContainer]:
        containers: dict[str, SelfServiceContainer] = {}
        for container_json in self.list():
            if not isinstance(container_json, dict):
                continue
            container = container_from_json(container_json)
            containers[container.reference] = container
        return containers

    def get_self_service_container(self, container_ref: str) -> SelfServiceContainer:
        result = self.engine.engine_get_result(f"{PATH_ROOT}/{container_ref}")
        if not isinstance(result, dict):
            raise DelphixEngineError(f"container {container_ref} not found")
        return container_from_json(result)

    def _container_operation(
        self, container_ref: str, verb: str, parameters_type: str
    ) -> EngineActionResult:
        return self.engine.engine_post_action(
            f"{PATH_ROOT}/{container_ref}/{verb}", {"type": parameters_type}
        )

    def refresh(self, container_ref: str) -> EngineActionResult:
        return self.engine.engine_post_action(
            f"{PATH_ROOT}/{container_ref}/refresh",
            {"type": "JSDataContainerRefreshParameters", "forceOption": False},
        )

    def reset(self, container_ref: str) -> EngineActionResult:
        return self._container_operation(
            container_ref, "reset", "JSDataContainerResetParameters"
        )

    def undo(self, container_ref: str) -> EngineActionResult:
        return self._container_operation(
            container_ref, "undo", "JSDataContainerUndoParameters"
        )

    def enable(self, container_ref: str) -> EngineActionResult:
        return self._container_operation(
            container_ref, "enable", "JSDataContainerEnableParameters"
        )

    def disable(self, container_ref: str) -> EngineActionResult:
        return self._container_operation(
            container_ref, "disable", "JSDataContainerDisableParameters"
        )

    def restore(self, container_ref: str, bookmark_ref: str) -> EngineActionResult:
        return self.engine.engine_post_action(
            f"{PATH_ROOT}/{container_ref}/restore",
            {
                "type": "JSDataContainerRestoreParameters",
                "forceOption": False,
                "timelinePointParameters": {
                    "type": "JSTimelinePointBookmarkInput",
                    "bookmark": bookmark_ref,
                },
            },
        )
