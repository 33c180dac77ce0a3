import wx


class LoadingPanel(wx.Panel):
    """Centered spinner with a caption, shown while the shell or a page waits."""

    def __init__(self, parent: wx.Window, message: str = "Loading...") -> None:
        super().__init__(parent)
        self._indicator: wx.ActivityIndicator | None = None
        self._message: wx.StaticText | None = None
        self._setup_ui(parent, message)

    def _setup_ui(self, parent: wx.Window, message: str) -> None:
        self.SetBackgroundColour(parent.GetBackgroundColour())

        sizer = wx.BoxSizer(wx.VERTICAL)
        sizer.AddStretchSpacer()

        self._indicator = wx.ActivityIndicator(self)
        self._indicator.SetMinSize(wx.Size(32, 32))
        sizer.Add(self._indicator, 0, wx.ALIGN_CENTER | wx.ALL, 12)

        self._message = wx.StaticText(self, label=message)
        font = self._message.GetFont()
        font.PointSize = 12
        self._message.SetFont(font)
        self._message.SetForegroundColour(wx.Colour(100, 100, 100))
        sizer.Add(self._message, 0, wx.ALIGN_CENTER | wx.ALL, 6)

        sizer.AddStretchSpacer()
        self.SetSizer(sizer)

    def set_message(self, message: str) -> None:
        if self._message:
            self._message.SetLabel(message)
            self.Layout()

    def start(self, message: str | None = None) -> None:
        if message is not None:
            self.set_message(message)
        if self._indicator and not self._indicator.IsRunning():
            self._indicator.Start()
        self.Show()

    def stop(self) -> None:
        if self._indicator and self._indicator.IsRunning():
            self._indicator.Stop()
        self.Hide()
