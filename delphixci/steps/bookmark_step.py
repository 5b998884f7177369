import threading
from dataclasses import dataclass
from typing import Final

import structlog

from delphixci.engine.bookmark_repository import SelfServiceBookmarkRepository
from delphixci.engine.container_repository import SelfServiceRepository
from delphixci.engine.engine import EngineResolver
from delphixci.engine.objects import EngineActionResult
from delphixci.errors import DelphixEngineError
from delphixci.errors import EngineConnectionError
from delphixci.messages import INVALID_ENGINE_ENVIRONMENT
from delphixci.steps.engine_action import follow_engine_action
from delphixci.steps.operations import NULL_SELECTION
from delphixci.steps.operations import BookmarkOperation
from delphixci.steps.operations import parse_operation
from delphixci.steps.step_result import StepResult
from delphixci.steps.step_result import failed_step

DEFAULT_BOOKMARK_NAME: Final = "Created By Jenkins"


@dataclass(frozen=True)
class SelfServiceBookmarkStep:
    delphix_engine: str
    delphix_bookmark: str
    delphix_operation: str
    delphix_container: str
    # None means DEFAULT_BOOKMARK_NAME for Create; Update needs an explicit name
    bookmark_name: None | str = None

    def _run_operation(
        self,
        operation: BookmarkOperation,
        bookmarks: SelfServiceBookmarkRepository,
        containers: SelfServiceRepository,
    ) -> EngineActionResult:
        match operation:
            case BookmarkOperation.CREATE:
                container = containers.get_self_service_container(
                    self.delphix_container
                )
                if container.active_branch is None:
                    raise DelphixEngineError(
                        f"container {container.reference} has no active branch"
                    )
                return bookmarks.create(
                    self.bookmark_name or DEFAULT_BOOKMARK_NAME,
                    container.active_branch,
                    container.reference,
                )
            case BookmarkOperation.UPDATE:
                if not self.bookmark_name:
                    raise DelphixEngineError(
                        "updating a bookmark needs the new bookmark name"
                    )
                return bookmarks.update(self.delphix_bookmark, self.bookmark_name)
            case BookmarkOperation.DELETE:
                return bookmarks.delete(self.delphix_bookmark)
            case BookmarkOperation.SHARE:
                return bookmarks.share(self.delphix_bookmark)

    def perform(
        self,
        resolve_engine: EngineResolver,
        build_log: structlog.stdlib.BoundLogger,
        stop_event: None | threading.Event = None,
    ) -> StepResult:
        engine = resolve_engine(self.delphix_engine)
        if engine is None:
            build_log.error(INVALID_ENGINE_ENVIRONMENT)
            return failed_step()

        bookmarks = SelfServiceBookmarkRepository(engine)
        containers = SelfServiceRepository(engine)

        try:
            operation = parse_operation(
                BookmarkOperation, self.delphix_operation, "Self Service Bookmark"
            )
            if (
                operation != BookmarkOperation.CREATE
                and self.delphix_bookmark == NULL_SELECTION
            ):
                build_log.error(INVALID_ENGINE_ENVIRONMENT)
                return failed_step()
            engine.login()
            action = self._run_operation(operation, bookmarks, containers)
        except DelphixEngineError as e:
            # Error from the engine (or an unknown operation): report and give up on this step
            build_log.error(e.message)
            return failed_step()
        except EngineConnectionError as e:
            build_log.error(e.message)
            return failed_step()

        published = {"DELPHIX_ENGINE": self.delphix_engine}
        bookmark_ref = (
            action.result
            if operation == BookmarkOperation.CREATE and isinstance(action.result, str)
            else self.delphix_bookmark
        )
        if bookmark_ref and bookmark_ref != NULL_SELECTION:
            published["DELPHIX_BOOKMARK"] = bookmark_ref
        return follow_engine_action(
            engine, action, build_log, published, stop_event=stop_event
        )
