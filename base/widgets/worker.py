import threading
from typing import Any, Callable

import wx

from base import get_logger
from base.errors import DormError

logger = get_logger(__name__)


class BackgroundTask(threading.Thread):
    """Runs ``work`` off the UI thread and reports back through wx.CallAfter.

    The callback receives ``("success", result)`` or ``("error", exception)``.
    A cancelled task never calls back.
    """

    def __init__(
        self,
        work: Callable[..., Any],
        callback: Callable[[str, Any], None],
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(daemon=True)
        self.work = work
        self.callback = callback
        self.args = args
        self.kwargs = kwargs
        self.should_stop = False

    def run(self) -> None:
        try:
            result = self.work(*self.args, **self.kwargs)
        except DormError as e:
            logger.warning(f"Background task failed: {type(e).__name__}: {e}")
            if not self.should_stop:
                wx.CallAfter(self._deliver, "error", e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error in background task: {e}")
            if not self.should_stop:
                wx.CallAfter(self._deliver, "error", e)
            return
        if not self.should_stop:
            wx.CallAfter(self._deliver, "success", result)

    def _deliver(self, status: str, value: Any) -> None:
        if not self.should_stop:
            self.callback(status, value)

    def stop(self) -> None:
        self.should_stop = True


def run_in_background(
    work: Callable[..., Any], callback: Callable[[str, Any], None], *args: Any, **kwargs: Any
) -> BackgroundTask:
    task = BackgroundTask(work, callback, *args, **kwargs)
    task.start()
    return task
