from typing import Final

from delphixci.engine.engine import DelphixEngine
from delphixci.engine.objects import EngineActionResult
from delphixci.engine.objects import SelfServiceBookmark
from delphixci.engine.objects import bookmark_from_json
from delphixci.errors import DelphixEngineError
from delphixci.json_types import JSONArray
from delphixci.json_types import JSONDict

PATH_ROOT: Final = "/resources/json/delphix/jetstream/bookmark"


class SelfServiceBookmarkRepository:
    """Self Service (Jet Stream) bookmarks on a single engine.

    Every method is exactly one request against the engine.
    """

    def __init__(self, engine: DelphixEngine) -> None:
        self.engine = engine

    def list(self) -> JSONArray:
        result = self.engine.engine_get_result(PATH_ROOT)
        if not isinstance(result, list):
            raise DelphixEngineError(f"expected a list of bookmarks, got {result}")
        return result

    def list_bookmarks(self) -> dict[str, SelfServiceBookmark]:
        bookmarks: dict[str, SelfServiceBookmark] = {}
        for bookmark_json in self.list():
            if not isinstance(bookmark_json, dict):
                continue
            bookmark = bookmark_from_json(bookmark_json)
            bookmarks[bookmark.reference] = bookmark
        return bookmarks

    def get(self, bookmark_ref: str) -> SelfServiceBookmark:
        result = self.engine.engine_get_result(f"{PATH_ROOT}/{bookmark_ref}")
        if not isinstance(result, dict):
            raise DelphixEngineError(f"bookmark {bookmark_ref} not found")
        return bookmark_from_json(result)

    def create(
        self, name: str, branch: str, source_data_layout: str
    ) -> EngineActionResult:
        request: JSONDict = {
            "type": "JSBookmarkCreateParameters",
            "bookmark": {
                "type": "JSBookmark",
                "name": name,
                "branch": branch,
            },
            "timelinePointParameters": {
                "type": "JSTimelinePointLatestTimeInput",
                "sourceDataLayout": source_data_layout,
            },
        }
        return self.engine.engine_post_action(PATH_ROOT, request)

    def update(
        self, bookmark_ref: str, name: str, description: None | str = None
    ) -> EngineActionResult:
        bookmark: dict[str, str] = {"type": "JSBookmark", "name": name}
        if description is not None:
            bookmark["description"] = description
        return self.engine.engine_post_action(f"{PATH_ROOT}/{bookmark_ref}", bookmark)

    def delete(self, bookmark_ref: str) -> EngineActionResult:
        return self.engine.engine_post_action(f"{PATH_ROOT}/{bookmark_ref}/delete", {})

    def share(self, bookmark_ref: str) -> EngineActionResult:
        return self.engine.engine_post_action(f"{PATH_ROOT}/{bookmark_ref}/share", {})

    def unshare(self, bookmark_ref: str) -> EngineActionResult:
        return self.engine.engine_post_action(
            f"{PATH_ROOT}/{bookmark_ref}/unshare", {}
        )
