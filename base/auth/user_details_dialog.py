import wx

from base.auth.models import User

DETAIL_FIELDS = (
    ("Name", "name"),
    ("Email", "email"),
    ("Role", "role"),
    ("Status", "status"),
    ("Student ID", "student_id"),
    ("Department", "department"),
    ("Gender", "gender"),
    ("Year Level", "year_level"),
    ("Assigned Block", "assigned_block"),
    ("Phone", "phone"),
)


def detail_rows(user: User) -> list[tuple[str, str]]:
    rows = []
    for label, attribute in DETAIL_FIELDS:
        value = getattr(user, attribute)
        if attribute == "role":
            value = user.role.value.upper()
        if value in (None, ""):
            continue
        rows.append((label, str(value)))
    return rows


class UserDetailsDialog(wx.Dialog):
    def __init__(self, parent, user: User):
        super().__init__(parent, title="User Details", size=wx.Size(450, 380))

        self.user = user

        panel = wx.Panel(self)
        main_sizer = wx.BoxSizer(wx.VERTICAL)

        title_label = wx.StaticText(panel, label="Account Information")
        title_font = title_label.GetFont()
        title_font.PointSize += 2
        title_font = title_font.Bold()
        title_label.SetFont(title_font)
        main_sizer.Add(title_label, 0, wx.ALL, 15)

        separator = wx.StaticLine(panel, style=wx.LI_HORIZONTAL)
        main_sizer.Add(separator, 0, wx.EXPAND | wx.LEFT | wx.RIGHT, 15)

        main_sizer.AddSpacer(15)

        rows = detail_rows(user)
        details_sizer = wx.FlexGridSizer(len(rows), 2, 10, 15)
        details_sizer.AddGrowableCol(1, 1)

        for label, value in rows:
            label_text = wx.StaticText(panel, label=f"{label}:")
            label_text.SetFont(label_text.GetFont().Bold())
            details_sizer.Add(label_text, 0, wx.ALIGN_RIGHT | wx.ALIGN_CENTER_VERTICAL)
            details_sizer.Add(wx.StaticText(panel, label=value), 0, wx.EXPAND)

        main_sizer.Add(details_sizer, 0, wx.EXPAND | wx.LEFT | wx.RIGHT, 30)

        main_sizer.AddStretchSpacer()

        button_sizer = wx.BoxSizer(wx.HORIZONTAL)
        button_sizer.AddStretchSpacer()

        close_button = wx.Button(panel, wx.ID_CLOSE, "Close")
        close_button.Bind(wx.EVT_BUTTON, self._on_close)
        button_sizer.Add(close_button, 0, wx.ALL, 10)

        main_sizer.Add(button_sizer, 0, wx.EXPAND)

        panel.SetSizer(main_sizer)

        self.Centre()

    def _on_close(self, event):
        self.EndModal(wx.ID_CLOSE)
