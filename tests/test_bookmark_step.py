import requests
import structlog
from structlog.testing import capture_logs

from delphixci.engine.bookmark_repository import PATH_ROOT
from delphixci.messages import INVALID_ENGINE_ENVIRONMENT
from delphixci.steps.bookmark_step import DEFAULT_BOOKMARK_NAME
from delphixci.steps.bookmark_step import SelfServiceBookmarkStep


def _resolver(engine):
    return lambda name: engine if name == "primary" else None


def _container() -> dict[str, str]:
    return {
        "type": "JSDataContainer",
        "reference": "JS_DATA_CONTAINER-1",
        "name": "qa",
        "activeBranch": "JS_BRANCH-3",
    }


def test_create_bookmark_on_active_branch(engine, http_wrapper) -> None:
    http_wrapper.add_login()
    http_wrapper.add_ok(_container())
    http_wrapper.add_ok("JS_BOOKMARK-5", job="JOB-1", action="ACTION-1")
    http_wrapper.add_action("COMPLETED")

    step = SelfServiceBookmarkStep(
        delphix_engine="primary",
        delphix_bookmark="NULL",
        delphix_operation="Create",
        delphix_container="JS_DATA_CONTAINER-1",
    )
    with capture_logs() as cap_logs:
        result = step.perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert result.succeeded
    assert result.status == "COMPLETED"
    assert result.published == {
        "DELPHIX_ENGINE": "primary",
        "DELPHIX_BOOKMARK": "JS_BOOKMARK-5",
    }
    _, _, create_body = http_wrapper.post_requests[2]
    assert create_body["bookmark"] == {
        "type": "JSBookmark",
        "name": DEFAULT_BOOKMARK_NAME,
        "branch": "JS_BRANCH-3",
    }
    assert create_body["timelinePointParameters"]["sourceDataLayout"] == (
        "JS_DATA_CONTAINER-1"
    )
    assert {"event": "Create bookmark: COMPLETED", "log_level": "info"} in cap_logs


def test_delete_bookmark_follows_job(engine, http_wrapper) -> None:
    http_wrapper.add_login()
    http_wrapper.add_ok("", job="JOB-1", action="ACTION-1")
    http_wrapper.add_action("EXECUTING", title="Delete bookmark")
    http_wrapper.add_job("RUNNING", "Deleting bookmark")
    http_wrapper.add_job("COMPLETED", "Bookmark deleted")

    step = SelfServiceBookmarkStep(
        delphix_engine="primary",
        delphix_bookmark="JS_BOOKMARK-5",
        delphix_operation="Delete",
        delphix_container="NULL",
    )
    result = step.perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert result.succeeded
    assert result.published["DELPHIX_JOB"] == "JOB-1"
    assert result.published["DELPHIX_BOOKMARK"] == "JS_BOOKMARK-5"
    assert http_wrapper.post_requests[2][0].endswith(f"{PATH_ROOT}/JS_BOOKMARK-5/delete")


def test_failed_job_fails_step(engine, http_wrapper) -> None:
    http_wrapper.add_login()
    http_wrapper.add_ok("", job="JOB-1", action="ACTION-1")
    http_wrapper.add_action("EXECUTING")
    http_wrapper.add_job("FAILED", "Bookmark is in use")

    result = SelfServiceBookmarkStep(
        delphix_engine="primary",
        delphix_bookmark="JS_BOOKMARK-5",
        delphix_operation="Share",
        delphix_container="NULL",
    ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert result.status == "FAILED"


def test_undefined_operation_is_logged_not_raised(engine, http_wrapper) -> None:
    step = SelfServiceBookmarkStep(
        delphix_engine="primary",
        delphix_bookmark="JS_BOOKMARK-5",
        delphix_operation="Explode",
        delphix_container="NULL",
    )
    with capture_logs() as cap_logs:
        result = step.perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert cap_logs == [
        {
            "event": 'Undefined Self Service Bookmark Operation "Explode"',
            "log_level": "error",
        }
    ]
    assert not http_wrapper.post_requests


def test_unknown_engine_is_invalid_environment(engine) -> None:
    with capture_logs() as cap_logs:
        result = SelfServiceBookmarkStep(
            delphix_engine="elsewhere",
            delphix_bookmark="JS_BOOKMARK-5",
            delphix_operation="Delete",
            delphix_container="NULL",
        ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert cap_logs[0]["event"] == INVALID_ENGINE_ENVIRONMENT


def test_missing_bookmark_selection_is_invalid_environment(engine, http_wrapper) -> None:
    with capture_logs() as cap_logs:
        result = SelfServiceBookmarkStep(
            delphix_engine="primary",
            delphix_bookmark="NULL",
            delphix_operation="Delete",
            delphix_container="NULL",
        ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert cap_logs[0]["event"] == INVALID_ENGINE_ENVIRONMENT
    assert not http_wrapper.post_requests


def test_unreachable_engine_does_not_raise(engine, http_wrapper) -> None:
    http_wrapper.responses.append(requests.ConnectionError("refused"))

    with capture_logs() as cap_logs:
        result = SelfServiceBookmarkStep(
            delphix_engine="primary",
            delphix_bookmark="JS_BOOKMARK-5",
            delphix_operation="Delete",
            delphix_container="NULL",
        ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert cap_logs[0]["event"] == "Unable to connect to Delphix Engine: engine.example.com"


def test_engine_error_does_not_raise(engine, http_wrapper) -> None:
    http_wrapper.add_login()
    http_wrapper.add_engine_error("The bookmark does not exist.")

    with capture_logs() as cap_logs:
        result = SelfServiceBookmarkStep(
            delphix_engine="primary",
            delphix_bookmark="JS_BOOKMARK-404",
            delphix_operation="Delete",
            delphix_container="NULL",
        ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert cap_logs[-1]["event"].startswith("The bookmark does not exist.")


def test_update_without_new_name_fails(engine, http_wrapper) -> None:
    http_wrapper.add_login()

    with capture_logs() as cap_logs:
        result = SelfServiceBookmarkStep(
            delphix_engine="primary",
            delphix_bookmark="JS_BOOKMARK-5",
            delphix_operation="Update",
            delphix_container="NULL",
        ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert not result.succeeded
    assert cap_logs[-1]["event"] == "updating a bookmark needs the new bookmark name"
    # only the login, the bookmark is left alone
    assert len(http_wrapper.post_requests) == 2


def test_update_renames_bookmark(engine, http_wrapper) -> None:
    http_wrapper.add_login()
    http_wrapper.add_ok("", action="ACTION-1")
    http_wrapper.add_action("COMPLETED", title="Update bookmark")

    result = SelfServiceBookmarkStep(
        delphix_engine="primary",
        delphix_bookmark="JS_BOOKMARK-5",
        delphix_operation="Update",
        delphix_container="NULL",
        bookmark_name="release-candidate",
    ).perform(_resolver(engine), structlog.stdlib.get_logger("build"))

    assert result.succeeded
    url, _, body = http_wrapper.post_requests[2]
    assert url.endswith(f"{PATH_ROOT}/JS_BOOKMARK-5")
    assert body == {"type": "JSBookmark", "name": "release-candidate"}
