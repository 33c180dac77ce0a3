from typing import Callable

import wx

from base.messages.center import Notification, Severity
from base.widgets.message_banner import BANNER_COLOURS

ICONS = {
    Severity.INFO: "ℹ",
    Severity.SUCCESS: "✔",
    Severity.WARNING: "⚠",
    Severity.ERROR: "✖",
}


class ToastRow(wx.Panel):
    def __init__(self, parent, notification: Notification, on_dismiss: Callable[[str], None]):
        super().__init__(parent)
        self.notification = notification

        background, foreground = BANNER_COLOURS[notification.severity]
        self.SetBackgroundColour(background)

        sizer = wx.BoxSizer(wx.HORIZONTAL)

        label = wx.StaticText(
            self, label=f"{ICONS[notification.severity]}  {notification.message}"
        )
        label.SetForegroundColour(foreground)
        label.Wrap(320)
        sizer.Add(label, 1, wx.ALIGN_CENTER_VERTICAL | wx.ALL, 8)

        close = wx.Button(self, label="✕", size=wx.Size(24, 22), style=wx.BORDER_NONE)
        close.SetBackgroundColour(background)
        close.Bind(wx.EVT_BUTTON, lambda evt: on_dismiss(notification.id))
        sizer.Add(close, 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 4)

        self.SetSizer(sizer)


class ToastPanel(wx.Panel):
    """Stack of transient notifications, newest at the bottom."""

    def __init__(self, parent, on_dismiss: Callable[[str], None]):
        super().__init__(parent)
        self.on_dismiss = on_dismiss
        self.rows: dict[str, ToastRow] = {}
        self.sizer = wx.BoxSizer(wx.VERTICAL)
        self.SetSizer(self.sizer)
        self.Hide()

    def render(self, notifications: tuple[Notification, ...]):
        wanted = {n.id for n in notifications}

        for notification_id in list(self.rows):
            if notification_id not in wanted:
                row = self.rows.pop(notification_id)
                self.sizer.Detach(row)
                row.Destroy()

        for notification in notifications:
            if notification.id not in self.rows:
                row = ToastRow(self, notification, self.on_dismiss)
                self.rows[notification.id] = row
                self.sizer.Add(row, 0, wx.EXPAND | wx.BOTTOM, 4)

        self.Show(bool(self.rows))
        self.Layout()
        self.GetParent().Layout()
