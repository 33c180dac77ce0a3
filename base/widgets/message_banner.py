import wx

from base.messages.center import BannerState, Severity

BANNER_COLOURS = {
    Severity.INFO: (wx.Colour(219, 234, 254), wx.Colour(30, 64, 175)),
    Severity.SUCCESS: (wx.Colour(220, 252, 231), wx.Colour(22, 101, 52)),
    Severity.WARNING: (wx.Colour(254, 249, 195), wx.Colour(133, 77, 14)),
    Severity.ERROR: (wx.Colour(254, 226, 226), wx.Colour(153, 27, 27)),
}


class MessageBanner(wx.Panel):
    """Full-width strip above the content area mirroring MessageCenter.banner."""

    def __init__(self, parent, on_dismiss=None):
        super().__init__(parent)
        self.on_dismiss = on_dismiss
        self.SetMinSize(wx.Size(-1, 36))

        sizer = wx.BoxSizer(wx.HORIZONTAL)

        self.message_text = wx.StaticText(self, label="")
        font = self.message_text.GetFont()
        font.PointSize = 10
        self.message_text.SetFont(font)
        sizer.Add(self.message_text, 1, wx.ALIGN_CENTER_VERTICAL | wx.LEFT, 16)

        self.close_button = wx.Button(self, label="✕", size=wx.Size(28, 24), style=wx.BORDER_NONE)
        self.close_button.SetToolTip("Dismiss")
        self.close_button.Bind(wx.EVT_BUTTON, self._on_close)
        sizer.Add(self.close_button, 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 8)

        self.SetSizer(sizer)
        self.Hide()

    def render(self, state: BannerState):
        if not state.visible or not state.message:
            if self.IsShown():
                self.Hide()
                self.GetParent().Layout()
            return

        background, foreground = BANNER_COLOURS.get(state.severity, BANNER_COLOURS[Severity.INFO])
        self.SetBackgroundColour(background)
        self.message_text.SetForegroundColour(foreground)
        self.message_text.SetLabel(state.message)
        self.close_button.SetBackgroundColour(background)
        self.close_button.Show(state.dismissible)

        self.Show()
        self.Refresh()
        self.GetParent().Layout()

    def _on_close(self, event):
        if self.on_dismiss:
            self.on_dismiss()
