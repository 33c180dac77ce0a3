import wx

from base.auth.models import User


class AccessDeniedPanel(wx.Panel):
    """Shown in the content area when the user's role may not open a page."""

    def __init__(self, parent, on_go_home=None):
        super().__init__(parent)
        self.on_go_home = on_go_home

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.AddStretchSpacer()

        icon_text = wx.StaticText(self, label="⚠️")
        font = icon_text.GetFont()
        font.PointSize = 32
        icon_text.SetFont(font)
        sizer.Add(icon_text, 0, wx.ALIGN_CENTER | wx.TOP, 20)

        title = wx.StaticText(self, label="Access Denied")
        font = title.GetFont()
        font.PointSize = 14
        font = font.Bold()
        title.SetFont(font)
        sizer.Add(title, 0, wx.ALIGN_CENTER | wx.TOP, 10)

        self.message = wx.StaticText(self, label="")
        sizer.Add(self.message, 0, wx.ALIGN_CENTER | wx.TOP, 10)

        self.role_text = wx.StaticText(self, label="")
        font = self.role_text.GetFont()
        font = font.Bold()
        self.role_text.SetFont(font)
        sizer.Add(self.role_text, 0, wx.ALIGN_CENTER | wx.TOP, 5)

        home_btn = wx.Button(self, label="Back to Dashboard")
        home_btn.Bind(wx.EVT_BUTTON, self._on_home)
        sizer.Add(home_btn, 0, wx.ALIGN_CENTER | wx.TOP | wx.BOTTOM, 20)

        sizer.AddStretchSpacer()
        self.SetSizer(sizer)

    def show_for(self, message: str, user: User | None):
        self.message.SetLabel(message)
        self.role_text.SetLabel(f"Your role: {user.role.value}" if user else "")
        self.Layout()

    def _on_home(self, event):
        if self.on_go_home:
            self.on_go_home()
