import wx

from features.common.page_view import PageView
from features.common.resources import format_cell

from .service import DashboardData, DashboardService


class StatCardPanel(wx.Panel):
    def __init__(self, parent, name: str, value: str, on_click):
        super().__init__(parent, style=wx.BORDER_SIMPLE)
        self.SetBackgroundColour(wx.WHITE)
        self.SetMinSize(wx.Size(180, 90))

        sizer = wx.BoxSizer(wx.VERTICAL)
        name_text = wx.StaticText(self, label=name)
        name_text.SetForegroundColour(wx.Colour(100, 100, 100))
        sizer.Add(name_text, 0, wx.ALL, 10)

        value_text = wx.StaticText(self, label=value)
        font = value_text.GetFont()
        font.PointSize = 18
        value_text.SetFont(font.Bold())
        sizer.Add(value_text, 0, wx.LEFT | wx.RIGHT | wx.BOTTOM, 10)
        self.SetSizer(sizer)

        for window in (self, name_text, value_text):
            window.Bind(wx.EVT_LEFT_UP, lambda evt: on_click())
            window.SetCursor(wx.Cursor(wx.CURSOR_HAND))


class DashboardView(PageView):
    def build(self):
        self.service = DashboardService(self.context.api)

        self.greeting = wx.StaticText(self.body, label="")
        font = self.greeting.GetFont()
        font.PointSize = 13
        self.greeting.SetFont(font)
        self.body_sizer.Add(self.greeting, 0, wx.BOTTOM, 20)

        self.cards_sizer = wx.WrapSizer(wx.HORIZONTAL)
        self.body_sizer.Add(self.cards_sizer, 0, wx.EXPAND | wx.BOTTOM, 20)

        self.recent_title = wx.StaticText(self.body, label="Recent Applications")
        self.recent_title.SetFont(self.recent_title.GetFont().Bold())
        self.body_sizer.Add(self.recent_title, 0, wx.BOTTOM, 8)

        self.recent_list = wx.ListCtrl(self.body, style=wx.LC_REPORT | wx.BORDER_SIMPLE)
        self.recent_list.AppendColumn("#", width=60)
        self.recent_list.AppendColumn("Academic Year", width=140)
        self.recent_list.AppendColumn("Status", width=120)
        self.recent_list.AppendColumn("Submitted", width=180)
        self.body_sizer.Add(self.recent_list, 1, wx.EXPAND)

    def fetch(self):
        return self.service.load(self.user)

    def populate(self, data: DashboardData):
        self.greeting.SetLabel(data.greeting)

        self.cards_sizer.Clear(delete_windows=True)
        for card in data.cards:
            panel = StatCardPanel(
                self.body, card.name, card.value, lambda path=card.path: self._open(path)
            )
            self.cards_sizer.Add(panel, 0, wx.RIGHT | wx.BOTTOM, 12)

        self.recent_list.DeleteAllItems()
        for row in data.recent:
            self.recent_list.Append(
                [format_cell(row.get(key)) for key in ("id", "academic_year", "status", "created_at")]
            )
        self.recent_title.Show(bool(data.recent))
        self.recent_list.Show(bool(data.recent))
        self.body.Layout()

    def _open(self, path: str):
        if self.context.router.resolve(path):
            self.context.router.navigate(path)
