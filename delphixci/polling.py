import threading
from typing import Callable
from typing import TypeVar

import structlog

from delphixci.messages import WAIT_INTERRUPTED

logger = structlog.stdlib.get_logger(__name__)

T = TypeVar("T")


def _wait_interrupted(stop_event: threading.Event, interval_seconds: float) -> bool:
    try:
        return stop_event.wait(interval_seconds)
    except KeyboardInterrupt:
        return True


def wait_for_completion(
    fetch: Callable[[], T],
    is_running: Callable[[T], bool],
    interval_seconds: float,
    stop_event: None | threading.Event = None,
    on_status: None | Callable[[T], None] = None,
    retry_on: tuple[type[Exception], ...] = (),
    on_error: None | Callable[[Exception], None] = None,
    log: None | structlog.stdlib.BoundLogger = None,
) -> None | T:
    """Fetch a status until it's no longer running, sleeping in between.

    There is no upper bound on the number of iterations. Exceptions listed in
    retry_on are handed to on_error and polling simply continues with the last
    known status; anything else propagates.

    Setting stop_event (or a KeyboardInterrupt during a fetch or wait) abandons the
    loop. In that case the last observed status is returned, which may still
    be a running one, or None if nothing could be fetched yet.
    """
    stop = stop_event if stop_event is not None else threading.Event()
    this_logger = log if log is not None else logger
    last_status: None | T = None
    while True:
        try:
            status = fetch()
        except KeyboardInterrupt:
            this_logger.warning(WAIT_INTERRUPTED)
            return last_status
        except retry_on as e:
            if on_error is not None:
                on_error(e)
            else:
                this_logger.warning(f"couldn't fetch status, retrying: {e}")
        else:
            last_status = status
            if on_status is not None:
                on_status(status)
            if not is_running(status):
                return status

        if _wait_interrupted(stop, interval_seconds):
            this_logger.warning(WAIT_INTERRUPTED)
            return last_status
