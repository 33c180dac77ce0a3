import wx

from base.auth.models import Role, User
from base.messages.catalog import BANNER_MESSAGES
from features.common.page_view import PageView

EDITABLE = {
    None: (("name", "Full Name"), ("phone", "Phone"), ("address", "Address")),
    Role.STUDENT: (
        ("department", "Department"),
        ("emergency_contact", "Emergency Contact"),
        ("emergency_phone", "Emergency Phone"),
    ),
}


class ProfileView(PageView):
    """Profile of the signed-in user; saving goes through the session manager."""

    def build(self):
        self.inputs: dict[str, wx.TextCtrl] = {}

        self.header = wx.StaticText(self.body, label="")
        self.header.SetFont(self.header.GetFont().Bold())
        self.body_sizer.Add(self.header, 0, wx.BOTTOM, 15)

        self.form = wx.FlexGridSizer(0, 2, 10, 15)
        self.form.AddGrowableCol(1, 1)
        self.body_sizer.Add(self.form, 0, wx.EXPAND)
        self.body_sizer.AddSpacer(20)

        buttons = wx.BoxSizer(wx.HORIZONTAL)
        buttons.AddStretchSpacer()
        self.save_button = wx.Button(self.body, label="Save Changes")
        self.save_button.Bind(wx.EVT_BUTTON, self.on_save)
        buttons.Add(self.save_button, 0)
        self.body_sizer.Add(buttons, 0, wx.EXPAND)

    def fetch(self):
        return self.context.session.refresh_user()

    def populate(self, user: User):
        self.header.SetLabel(f"{user.email} · {user.role.value.title()} · {user.status}")
        self.form.Clear(delete_windows=True)
        self.inputs.clear()

        fields = EDITABLE[None] + EDITABLE.get(user.role, ())
        for name, label in fields:
            self.form.Add(wx.StaticText(self.body, label=f"{label}:"), 0, wx.ALIGN_CENTER_VERTICAL)
            control = wx.TextCtrl(self.body, value=str(getattr(user, name) or ""))
            self.inputs[name] = control
            self.form.Add(control, 1, wx.EXPAND)

        if not (user.phone and user.name):
            self.context.messages.show_banner(
                BANNER_MESSAGES["PROFILE_INCOMPLETE"],
                "warning",
            )
        self.body.Layout()

    def on_save(self, event):
        data = {name: control.GetValue().strip() for name, control in self.inputs.items()}
        self.save_button.Enable(False)

        def done(user: User):
            self.save_button.Enable(True)
            self.context.messages.show_success("Profile updated successfully")
            self.populate(user)

        self.run_task(
            self.context.session.update_profile,
            done,
            data,
            on_error=lambda error: self.save_button.Enable(True),
        )
