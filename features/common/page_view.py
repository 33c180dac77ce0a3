from typing import Any, Optional

import wx

from base import get_logger
from base.errors import DormError, UnauthorizedError
from base.nav.router import PageDefinition
from base.widgets.loading_panel import LoadingPanel
from base.widgets.worker import BackgroundTask, run_in_background

logger = get_logger(__name__)


class PageView(wx.Panel):
    """Common frame of a content page: title, body, and one background fetch at a time.

    Subclasses build their controls into ``self.body`` in ``build`` and
    implement ``fetch`` (runs on a worker thread) and ``populate`` (UI thread).
    """

    def __init__(self, parent, context, page: PageDefinition):
        super().__init__(parent)
        self.context = context
        self.page = page
        self.task: Optional[BackgroundTask] = None

        main_sizer = wx.BoxSizer(wx.VERTICAL)

        title = wx.StaticText(self, label=page.title)
        font = title.GetFont()
        font.PointSize = 18
        font = font.Bold()
        title.SetFont(font)
        main_sizer.AddSpacer(20)
        main_sizer.Add(title, 0, wx.LEFT | wx.RIGHT, 40)

        main_sizer.AddSpacer(15)
        main_sizer.Add(wx.StaticLine(self), 0, wx.EXPAND | wx.LEFT | wx.RIGHT, 40)
        main_sizer.AddSpacer(15)

        self.loading_panel = LoadingPanel(self, "Loading...")
        self.loading_panel.Hide()
        main_sizer.Add(self.loading_panel, 1, wx.EXPAND)

        self.body = wx.Panel(self)
        self.body_sizer = wx.BoxSizer(wx.VERTICAL)
        self.body.SetSizer(self.body_sizer)
        main_sizer.Add(self.body, 1, wx.EXPAND | wx.LEFT | wx.RIGHT | wx.BOTTOM, 40)

        self.SetSizer(main_sizer)
        self.build()

    @property
    def user(self):
        return self.context.session.get_current_user()

    def build(self):
        pass

    def fetch(self) -> Any:
        return None

    def populate(self, data: Any):
        pass

    def refresh(self):
        if self.task and self.task.is_alive():
            self.task.stop()
        self.body.Hide()
        self.loading_panel.start(f"Loading {self.page.title.lower()}...")
        self.Layout()
        self.task = run_in_background(self.fetch, self._on_fetched)

    def _on_fetched(self, status: str, value: Any):
        self.task = None
        self.loading_panel.stop()
        self.body.Show()
        if status == "success":
            self.populate(value)
        else:
            self.report_error(value)
        self.Layout()

    def run_task(self, work, on_done, *args, on_error=None):
        """Run a mutation off the UI thread; errors are reported, success goes to ``on_done``."""

        def callback(status: str, value: Any):
            if status == "success":
                on_done(value)
                return
            if on_error:
                on_error(value)
            self.report_error(value)

        return run_in_background(work, callback, *args)

    def report_error(self, error: Any):
        if isinstance(error, UnauthorizedError):
            # the shell is already on its way to the login window
            return
        if isinstance(error, DormError):
            self.context.messages.show_error(error.message)
        else:
            logger.error(f"Unexpected error on {self.page.path}: {error}")
            self.context.messages.show_error(f"Unexpected error: {error}")

    def cleanup(self):
        if self.task:
            self.task.stop()
