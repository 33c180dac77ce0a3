from typing import Any, Callable, Optional

import wx

from base import get_logger
from base.auth.models import User
from base.auth.register_dialog import RegisterDialog
from base.errors import DormError
from base.widgets.worker import BackgroundTask, run_in_background

logger = get_logger(__name__)


class LoginWindow(wx.Frame):
    def __init__(self, context, on_login_success: Callable[[User], None], notice: str = ""):
        super().__init__(None, title="Smart DMS - Login", size=wx.Size(480, 420))

        self.context = context
        self.on_login_success = on_login_success
        self.task: Optional[BackgroundTask] = None

        panel = wx.Panel(self)
        panel.SetBackgroundColour(wx.WHITE)

        main_sizer = wx.BoxSizer(wx.VERTICAL)
        main_sizer.AddStretchSpacer(1)

        title_label = wx.StaticText(panel, label="Smart Dormitory Management")
        title_font = title_label.GetFont()
        title_font.PointSize += 6
        title_font = title_font.Bold()
        title_label.SetFont(title_font)
        main_sizer.Add(title_label, 0, wx.ALIGN_CENTER | wx.BOTTOM, 6)

        subtitle_label = wx.StaticText(panel, label="Sign in to your account")
        subtitle_label.SetForegroundColour(wx.Colour(100, 100, 100))
        main_sizer.Add(subtitle_label, 0, wx.ALIGN_CENTER | wx.BOTTOM, 20)

        form_sizer = wx.FlexGridSizer(2, 2, 10, 10)
        form_sizer.AddGrowableCol(1, 1)

        form_sizer.Add(wx.StaticText(panel, label="Email:"), 0, wx.ALIGN_CENTER_VERTICAL)
        self.email_input = wx.TextCtrl(panel, size=wx.Size(240, -1))
        form_sizer.Add(self.email_input, 1, wx.EXPAND)

        form_sizer.Add(wx.StaticText(panel, label="Password:"), 0, wx.ALIGN_CENTER_VERTICAL)
        self.password_input = wx.TextCtrl(panel, style=wx.TE_PASSWORD | wx.TE_PROCESS_ENTER)
        self.password_input.Bind(wx.EVT_TEXT_ENTER, self.on_sign_in)
        form_sizer.Add(self.password_input, 1, wx.EXPAND)

        main_sizer.Add(form_sizer, 0, wx.ALIGN_CENTER | wx.LEFT | wx.RIGHT, 40)
        main_sizer.AddSpacer(20)

        self.sign_in_button = wx.Button(panel, label="Sign in")
        self.sign_in_button.SetMinSize(wx.Size(240, 36))
        self.sign_in_button.SetDefault()
        self.sign_in_button.Bind(wx.EVT_BUTTON, self.on_sign_in)
        main_sizer.Add(self.sign_in_button, 0, wx.ALIGN_CENTER | wx.BOTTOM, 8)

        self.register_button = wx.Button(panel, label="Create an account")
        self.register_button.Bind(wx.EVT_BUTTON, self.on_register)
        main_sizer.Add(self.register_button, 0, wx.ALIGN_CENTER)

        main_sizer.AddStretchSpacer(1)
        main_sizer.Add(wx.StaticLine(panel, style=wx.LI_HORIZONTAL), 0, wx.EXPAND | wx.ALL, 10)

        self.status_text = wx.StaticText(panel, label=notice)
        self.status_text.SetForegroundColour(wx.Colour(100, 100, 100))
        main_sizer.Add(self.status_text, 0, wx.ALIGN_CENTER | wx.BOTTOM, 10)

        panel.SetSizer(main_sizer)
        self.Bind(wx.EVT_CLOSE, self._on_close)
        self.Centre()

    def _set_busy(self, busy: bool, message: str = ""):
        self.sign_in_button.Enable(not busy)
        self.register_button.Enable(not busy)
        self.status_text.SetForegroundColour(wx.Colour(100, 100, 100))
        self.status_text.SetLabel(message)
        self.Layout()

    def on_sign_in(self, event):
        email = self.email_input.GetValue().strip()
        password = self.password_input.GetValue()
        if not email or not password:
            self._show_error("Please enter your email and password.", modal=False)
            return

        self._set_busy(True, "Signing in...")
        self.task = run_in_background(
            self.context.session.login, self._on_login_finished, email, password
        )

    def _on_login_finished(self, status: str, value: Any):
        self.task = None
        if status == "success":
            user, _token = value
            self._on_success(user)
            return

        if isinstance(value, DormError):
            self._show_error(value.message)
        else:
            logger.error(f"Login error: {value}")
            self._show_error(f"Login failed: {value}")

    def on_register(self, event):
        dialog = RegisterDialog(self, self.context)
        result = dialog.ShowModal()
        registration = dialog.result
        dialog.Destroy()

        if result != wx.ID_OK or registration is None:
            return

        if registration.requires_approval or registration.user is None:
            self.status_text.SetForegroundColour(wx.Colour(0, 120, 0))
            self.status_text.SetLabel(
                "Registration successful! Your account is pending admin approval."
            )
            self.Layout()
            return

        if self.context.session.is_authenticated():
            self.context.messages.show_success(
                f"🎉 Welcome {registration.user.name}! "
                f"Your {registration.user.role.value} account has been created successfully."
            )
            self._on_success(registration.user)

    def _show_error(self, message: str, modal: bool = True):
        self._set_busy(False)
        self.status_text.SetLabel(message)
        self.status_text.SetForegroundColour(wx.RED)
        self.Layout()
        if modal:
            wx.MessageBox(message, "Login Failed", wx.OK | wx.ICON_ERROR)

    def _on_success(self, user: User):
        logger.info(f"Signed in as {user.email} ({user.role.value})")
        self.status_text.SetForegroundColour(wx.Colour(0, 150, 0))
        self.status_text.SetLabel("Login successful! Opening application...")

        self.Hide()
        self.on_login_success(user)
        self.Destroy()

    def _on_close(self, event):
        if self.task:
            self.task.stop()
        event.Skip()
