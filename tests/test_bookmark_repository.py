import pytest

from delphixci.engine.bookmark_repository import PATH_ROOT
from delphixci.engine.bookmark_repository import SelfServiceBookmarkRepository
from delphixci.errors import DelphixEngineError

_BASE = "https://engine.example.com"


def _bookmark(reference: str, name: str) -> dict[str, str | bool]:
    return {
        "type": "JSBookmark",
        "reference": reference,
        "name": name,
        "branch": "JS_BRANCH-1",
        "container": "JS_DATA_CONTAINER-1",
        "template": "JS_DATA_TEMPLATE-1",
        "shared": False,
        "timestamp": "2024-03-01T10:00:00.000Z",
    }


def test_list_bookmarks_is_keyed_by_reference(engine, http_wrapper) -> None:
    http_wrapper.add_ok(
        [_bookmark("JS_BOOKMARK-2", "nightly"), _bookmark("JS_BOOKMARK-1", "weekly")]
    )

    bookmarks = SelfServiceBookmarkRepository(engine).list_bookmarks()

    assert len(http_wrapper.get_requests) == 1
    assert http_wrapper.get_requests[0][0] == f"{_BASE}{PATH_ROOT}"
    assert list(bookmarks.keys()) == ["JS_BOOKMARK-2", "JS_BOOKMARK-1"]
    assert bookmarks["JS_BOOKMARK-1"].name == "weekly"
    assert bookmarks["JS_BOOKMARK-1"].container == "JS_DATA_CONTAINER-1"


def test_list_with_non_list_result_raises(engine, http_wrapper) -> None:
    http_wrapper.add_ok({"not": "a list"})

    with pytest.raises(DelphixEngineError):
        SelfServiceBookmarkRepository(engine).list()


def test_get_bookmark(engine, http_wrapper) -> None:
    http_wrapper.add_ok(_bookmark("JS_BOOKMARK-3", "before-release"))

    bookmark = SelfServiceBookmarkRepository(engine).get("JS_BOOKMARK-3")

    assert http_wrapper.get_requests[0][0] == f"{_BASE}{PATH_ROOT}/JS_BOOKMARK-3"
    assert bookmark.name == "before-release"
    assert not bookmark.shared


def test_create_posts_bookmark_create_parameters(engine, http_wrapper) -> None:
    http_wrapper.add_ok("JS_BOOKMARK-4", job="JOB-1", action="ACTION-1")

    result = SelfServiceBookmarkRepository(engine).create(
        "Created By Jenkins", "JS_BRANCH-4", "JS_DATA_CONTAINER-1"
    )

    assert len(http_wrapper.post_requests) == 1
    url, _, body = http_wrapper.post_requests[0]
    assert url == f"{_BASE}{PATH_ROOT}"
    assert body == {
        "type": "JSBookmarkCreateParameters",
        "bookmark": {
            "type": "JSBookmark",
            "name": "Created By Jenkins",
            "branch": "JS_BRANCH-4",
        },
        "timelinePointParameters": {
            "type": "JSTimelinePointLatestTimeInput",
            "sourceDataLayout": "JS_DATA_CONTAINER-1",
        },
    }
    assert result.result == "JS_BOOKMARK-4"
    assert result.job == "JOB-1"
    assert result.action == "ACTION-1"


def test_delete_posts_empty_body(engine, http_wrapper) -> None:
    http_wrapper.add_ok("", action="ACTION-2")

    result = SelfServiceBookmarkRepository(engine).delete("JS_BOOKMARK-4")

    assert http_wrapper.post_requests == [
        (f"{_BASE}{PATH_ROOT}/JS_BOOKMARK-4/delete", http_wrapper.post_requests[0][1], {})
    ]
    assert result.job is None
    assert result.action == "ACTION-2"


def test_update_posts_bookmark(engine, http_wrapper) -> None:
    http_wrapper.add_ok("", action="ACTION-3")

    SelfServiceBookmarkRepository(engine).update(
        "JS_BOOKMARK-4", "renamed", description="from CI"
    )

    url, _, body = http_wrapper.post_requests[0]
    assert url == f"{_BASE}{PATH_ROOT}/JS_BOOKMARK-4"
    assert body == {"type": "JSBookmark", "name": "renamed", "description": "from CI"}


@pytest.mark.parametrize("verb", ["share", "unshare"])
def test_share_and_unshare(engine, http_wrapper, verb: str) -> None:
    http_wrapper.add_ok("", action="ACTION-4")

    getattr(SelfServiceBookmarkRepository(engine), verb)("JS_BOOKMARK-4")

    assert len(http_wrapper.post_requests) == 1
    url, _, body = http_wrapper.post_requests[0]
    assert url == f"{_BASE}{PATH_ROOT}/JS_BOOKMARK-4/{verb}"
    assert body == {}
