from typing import Optional

import wx

from base.auth.models import User


class StatusBar(wx.Panel):
    """Bottom strip: transient status text on the left, signed-in user on the right."""

    def __init__(self, parent, api_url: str = ""):
        super().__init__(parent)
        self.SetMinSize(wx.Size(-1, 26))

        sizer = wx.BoxSizer(wx.HORIZONTAL)

        self.message_text = wx.StaticText(self, label="")
        sizer.Add(self.message_text, 0, wx.ALIGN_CENTER_VERTICAL | wx.LEFT, 10)

        sizer.AddStretchSpacer()

        self.server_text = wx.StaticText(self, label=api_url)
        self.server_text.SetForegroundColour(wx.Colour(120, 120, 120))
        sizer.Add(self.server_text, 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 15)

        self.user_text = wx.StaticText(self, label="")
        font = self.user_text.GetFont().Bold()
        self.user_text.SetFont(font)
        sizer.Add(self.user_text, 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 10)

        self.SetSizer(sizer)

    def set_user(self, user: Optional[User]):
        if user is None:
            self.user_text.SetLabel("")
        else:
            self.user_text.SetLabel(f"{user.name} ({user.role.value})")
        self.Layout()

    def show_message(self, message: str):
        wx.CallAfter(self._show_message_impl, message)

    def _show_message_impl(self, message: str):
        self.message_text.SetLabel(message)
        self.Layout()

    def clear(self):
        wx.CallAfter(self._show_message_impl, "")
