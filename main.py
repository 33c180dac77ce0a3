from typing import Callable, Optional

import wx

from base import get_logger
from base.__version__ import __version__
from base.auth.access_denied_panel import AccessDeniedPanel
from base.auth.guard import AccessDecision, ShellGate, ShellState
from base.auth.login_view import LoginWindow
from base.auth.models import User
from base.config import load_config
from base.context import AppContext, create_context
from base.errors import UnauthorizedError
from base.logging_config import setup_logging
from base.menu_bar import AppMenuBar
from base.messages import banner_for_page, welcome_message
from base.nav.navigation import AccordionNavigation
from base.nav.router import HOME_PATH, NavigationEvent
from base.status.status_bar import StatusBar
from base.widgets.loading_panel import LoadingPanel
from base.widgets.message_banner import MessageBanner
from base.widgets.toast_panel import ToastPanel
from base.widgets.worker import run_in_background
from features.allocations.allocations_view import AllocationsView
from features.catalog import build_pages
from features.common.form_view import FormView
from features.common.record_view import RecordView, ReportView
from features.common.resource_view import ResourceListView
from features.dashboard.dashboard_view import DashboardView
from features.profile.profile_view import ProfileView

logger = get_logger(__name__)

SESSION_RECHECK_MS = 250


def wx_scheduler(delay: float, callback: Callable[[], None]) -> None:
    wx.CallAfter(wx.CallLater, max(int(delay * 1000), 1), callback)


class MainWindow(wx.Frame):
    def __init__(self, context: AppContext, current_user: User, shell: "Shell"):
        super().__init__(None, title=f"Smart DMS v{__version__}", size=wx.Size(1200, 780))

        self.context = context
        self.shell = shell
        self.current_user = current_user
        logger.info(f"Main window initialized for user: {current_user.email}")

        self.menu_bar = AppMenuBar(self, current_user)

        panel = wx.Panel(self)
        root_sizer = wx.BoxSizer(wx.VERTICAL)

        self.banner = MessageBanner(panel, on_dismiss=context.messages.hide_banner)
        root_sizer.Add(self.banner, 0, wx.EXPAND)

        main_sizer = wx.BoxSizer(wx.HORIZONTAL)

        self.navigation = AccordionNavigation(panel, self.on_navigation_clicked)
        self.navigation.load_for(current_user)
        main_sizer.Add(self.navigation, 0, wx.EXPAND)

        separator = wx.StaticLine(panel, style=wx.LI_VERTICAL)
        main_sizer.Add(separator, 0, wx.EXPAND)

        right_sizer = wx.BoxSizer(wx.VERTICAL)

        self.toasts = ToastPanel(panel, on_dismiss=context.messages.dismiss)
        right_sizer.Add(self.toasts, 0, wx.EXPAND | wx.ALL, 8)

        self.content_panel = wx.Panel(panel)
        self.content_sizer = wx.BoxSizer(wx.VERTICAL)
        self.content_panel.SetSizer(self.content_sizer)
        right_sizer.Add(self.content_panel, 1, wx.EXPAND)

        main_sizer.Add(right_sizer, 1, wx.EXPAND)
        root_sizer.Add(main_sizer, 1, wx.EXPAND)

        root_sizer.Add(wx.StaticLine(panel, style=wx.LI_HORIZONTAL), 0, wx.EXPAND)

        self.status_bar = StatusBar(panel, context.config.api_url)
        self.status_bar.set_user(current_user)
        root_sizer.Add(self.status_bar, 0, wx.EXPAND)

        panel.SetSizer(root_sizer)

        self.view_classes = {
            "dashboard": DashboardView,
            "list": ResourceListView,
            "form": FormView,
            "record": RecordView,
            "reports": ReportView,
            "allocations": AllocationsView,
            "profile": ProfileView,
        }
        self.views: dict[str, wx.Window] = {}
        self.current_view: Optional[wx.Window] = None
        self.current_path: Optional[str] = None

        self.loading_panel = LoadingPanel(self.content_panel, "Loading view...")
        self.content_sizer.Add(self.loading_panel, 1, wx.EXPAND)
        self.loading_panel.Hide()

        self.access_denied = AccessDeniedPanel(self.content_panel, on_go_home=self.go_home)
        self.content_sizer.Add(self.access_denied, 1, wx.EXPAND)
        self.access_denied.Hide()

        self._unsubscribe = [
            context.router.subscribe(lambda event: wx.CallAfter(self.on_navigation_event, event)),
            context.messages.subscribe(lambda center: wx.CallAfter(self.render_messages)),
        ]
        self.Bind(wx.EVT_CLOSE, self.on_close)

        self.render_messages()

    def teardown(self):
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
        for view in self.views.values():
            view.cleanup()

    def render_messages(self):
        if not self:
            return
        self.banner.render(self.context.messages.banner)
        self.toasts.render(self.context.messages.notifications)

    def show_welcome_banner(self):
        self.context.messages.show_banner(welcome_message(self.current_user.role))

    def on_navigation_clicked(self, path: str):
        if path == self.current_path and self.current_view and self.current_view.IsShown():
            return
        self.navigate(path)

    def navigate(self, path: str):
        try:
            self.context.router.navigate(path)
        except KeyError:
            logger.warning(f"No page registered for {path}")
            self.context.messages.show_warning("This page is not available in the desktop client.")

    def go_home(self):
        self.navigate(HOME_PATH)

    def refresh_page(self):
        if self.current_view and self.current_view is not self.access_denied:
            self.current_view.refresh()

    def on_navigation_event(self, event: NavigationEvent):
        if not self or event.decision is AccessDecision.LOGIN_REQUIRED:
            return

        self.current_path = event.path
        self.navigation.select_path(event.path)
        if self.current_view:
            self.current_view.Hide()

        if event.decision is AccessDecision.DENIED:
            self.access_denied.show_for(event.page.guard.message, self.current_user)
            self.access_denied.Show()
            self.current_view = self.access_denied
            self.status_bar.show_message("Access denied")
            self.content_panel.Layout()
            return

        banner = banner_for_page(event.path, self.current_user.role)
        if banner:
            self.context.messages.show_banner(*banner)

        view = self._get_or_create_view(event)
        view.Show()
        self.current_view = view
        self.status_bar.show_message(event.page.title)
        self.content_panel.Layout()
        view.refresh()

    def _get_or_create_view(self, event: NavigationEvent):
        view = self.views.get(event.path)
        if view is None:
            view_class = self.view_classes[event.page.kind]
            view = view_class(self.content_panel, self.context, event.page)
            self.views[event.path] = view
            self.content_sizer.Add(view, 1, wx.EXPAND)
            view.Hide()
        return view

    def refresh_profile(self):
        def done(status, value):
            if not self:
                return
            if status == "success":
                self.current_user = value
                self.status_bar.set_user(value)
                self.menu_bar = AppMenuBar(self, value)
                self.context.messages.show_success("Profile refreshed")
            elif not isinstance(value, UnauthorizedError) and getattr(value, "message", None):
                self.context.messages.show_error(value.message)

        run_in_background(self.context.session.refresh_user, done)

    def logout(self):
        self.status_bar.show_message("Signing out...")
        run_in_background(
            self.context.session.logout,
            lambda status, value: self.shell.show_login("You have been logged out."),
        )

    def on_close(self, event):
        self.teardown()
        event.Skip()


class Shell:
    """Decides between the login window and the main window from the stored session."""

    def __init__(self, context: AppContext):
        self.context = context
        self.gate = ShellGate(context.session)
        self.main_window: Optional[MainWindow] = None
        self.login_window: Optional[LoginWindow] = None
        self.splash: Optional[wx.Frame] = None
        context.router.subscribe(self._on_route)

    def start(self):
        state = self.gate.check()
        logger.info(f"Session check: {state.value}")

        if state is ShellState.LOADING:
            self._show_splash()
            wx.CallLater(SESSION_RECHECK_MS, self.start)
        elif state is ShellState.AUTHORIZED and self.gate.user is not None:
            self.show_main(self.gate.user)
        else:
            self.show_login()

    def _show_splash(self):
        if self.splash:
            return
        self.splash = wx.Frame(None, title="Smart DMS", size=wx.Size(360, 200), style=wx.CAPTION)
        LoadingPanel(self.splash, "Checking your session...")
        self.splash.Centre()
        self.splash.Show()

    def _close_splash(self):
        if self.splash:
            self.splash.Destroy()
            self.splash = None

    def _on_route(self, event: NavigationEvent):
        if event.decision is AccessDecision.LOGIN_REQUIRED:
            wx.CallAfter(self.show_login, "Your session has expired. Please sign in again.")

    def show_login(self, notice: str = ""):
        if self.login_window:
            self.login_window.status_text.SetLabel(notice)
            self.login_window.Raise()
        else:
            self.login_window = LoginWindow(self.context, self.on_login_success, notice)
            self.login_window.Show()

        self._close_splash()
        if self.main_window:
            self.main_window.teardown()
            self.main_window.Destroy()
            self.main_window = None

    def on_login_success(self, user: User):
        self.login_window = None
        self.show_main(user)

    def show_main(self, user: User):
        try:
            self.main_window = MainWindow(self.context, user, self)
            self.main_window.Maximize()
            self.main_window.Show()
            self._close_splash()
            self.main_window.go_home()
        except Exception as e:
            logger.exception(f"Fatal error in application: {e}")
            wx.MessageBox(
                f"Failed to start application: {str(e)}",
                "Application Error",
                wx.OK | wx.ICON_ERROR
            )
            raise


def main():
    config = load_config()
    setup_logging(config.log_dir, config.log_level)

    logger.info(f"Starting Smart DMS desktop client v{__version__}")

    app = wx.App()

    context = create_context(config, scheduler=wx_scheduler)
    context.router.register_all(build_pages())

    shell = Shell(context)
    shell.start()

    app.MainLoop()


if __name__ == "__main__":
    main()
