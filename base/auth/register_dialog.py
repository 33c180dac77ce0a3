from typing import Any, Optional

import wx

from base import get_logger
from base.auth.models import Role
from base.auth.registration import ROLE_FIELDS, build_registration_payload
from base.auth.session_manager import RegistrationResult
from base.errors import DormError
from base.widgets.worker import run_in_background

logger = get_logger(__name__)

FIELD_LABELS = {
    "student_id": "Student ID",
    "department": "Department",
    "gender": "Gender",
    "year_level": "Year Level",
    "assigned_block": "Assigned Block",
}
GENDERS = ("male", "female")


class RegisterDialog(wx.Dialog):
    def __init__(self, parent, context):
        super().__init__(parent, title="Create Account", size=wx.Size(460, 560))

        self.context = context
        self.result: Optional[RegistrationResult] = None
        self.inputs: dict[str, wx.Window] = {}

        panel = wx.Panel(self)
        main_sizer = wx.BoxSizer(wx.VERTICAL)

        title_label = wx.StaticText(panel, label="Register")
        title_font = title_label.GetFont()
        title_font.PointSize += 2
        title_font = title_font.Bold()
        title_label.SetFont(title_font)
        main_sizer.Add(title_label, 0, wx.ALL, 15)

        self.form = wx.FlexGridSizer(0, 2, 8, 12)
        self.form.AddGrowableCol(1, 1)

        self.type_choice = wx.Choice(panel, choices=[role.value.title() for role in Role])
        self.type_choice.SetSelection(0)
        self.type_choice.Bind(wx.EVT_CHOICE, self.on_type_changed)
        self._add_row(panel, "Account Type", self.type_choice)

        self._add_row(panel, "Full Name", self._text(panel, "name"))
        self._add_row(panel, "Email", self._text(panel, "email"))
        self._add_row(panel, "Password", self._text(panel, "password", wx.TE_PASSWORD))
        self._add_row(
            panel, "Confirm Password", self._text(panel, "password_confirmation", wx.TE_PASSWORD)
        )

        self.role_rows: dict[str, tuple[wx.StaticText, wx.Window]] = {}
        for name, label in FIELD_LABELS.items():
            if name == "gender":
                control = wx.Choice(panel, choices=[g.title() for g in GENDERS])
                control.Bind(wx.EVT_CHOICE, self.on_gender_changed)
                self.inputs[name] = control
            elif name == "assigned_block":
                control = wx.Choice(panel)
                self.inputs[name] = control
            else:
                control = self._text(panel, name)
            self.role_rows[name] = self._add_row(panel, label, control)

        main_sizer.Add(self.form, 1, wx.EXPAND | wx.LEFT | wx.RIGHT, 20)

        self.status_text = wx.StaticText(panel, label="")
        self.status_text.SetForegroundColour(wx.RED)
        main_sizer.Add(self.status_text, 0, wx.EXPAND | wx.ALL, 15)

        button_sizer = wx.BoxSizer(wx.HORIZONTAL)
        button_sizer.AddStretchSpacer()
        cancel_button = wx.Button(panel, wx.ID_CANCEL, "Cancel")
        button_sizer.Add(cancel_button, 0, wx.ALL, 5)
        self.submit_button = wx.Button(panel, wx.ID_ANY, "Register")
        self.submit_button.SetDefault()
        self.submit_button.Bind(wx.EVT_BUTTON, self.on_submit)
        button_sizer.Add(self.submit_button, 0, wx.ALL, 5)
        main_sizer.Add(button_sizer, 0, wx.EXPAND | wx.ALL, 10)

        panel.SetSizer(main_sizer)
        self.panel = panel
        self._update_role_rows()
        self.Centre()

    def _text(self, parent, name: str, style: int = 0) -> wx.TextCtrl:
        control = wx.TextCtrl(parent, style=style)
        self.inputs[name] = control
        return control

    def _add_row(self, parent, label: str, control: wx.Window):
        text = wx.StaticText(parent, label=f"{label}:")
        self.form.Add(text, 0, wx.ALIGN_CENTER_VERTICAL)
        self.form.Add(control, 1, wx.EXPAND)
        return text, control

    @property
    def selected_role(self) -> Role:
        return list(Role)[self.type_choice.GetSelection()]

    def _update_role_rows(self):
        visible = set(ROLE_FIELDS[self.selected_role])
        for name, (label, control) in self.role_rows.items():
            label.Show(name in visible)
            control.Show(name in visible)
        self.panel.Layout()

    def on_type_changed(self, event):
        self._update_role_rows()
        self.on_gender_changed(None)

    def on_gender_changed(self, event):
        block_choice: wx.Choice = self.inputs["assigned_block"]
        block_choice.Clear()
        gender = self._value("gender")
        if self.selected_role is not Role.SUPERVISOR or not gender:
            return

        def load():
            data = self.context.api.blocks.get_availability(gender).data or []
            return [block for block in data if isinstance(block, dict)]

        run_in_background(load, self._on_blocks_loaded)

    def _on_blocks_loaded(self, status: str, value: Any):
        block_choice: wx.Choice = self.inputs["assigned_block"]
        block_choice.Clear()
        if status != "success":
            self.status_text.SetLabel("Failed to load block availability. Please try again.")
            return
        for block in value:
            if not block.get("is_full"):
                block_choice.Append(str(block.get("block", "")))

    def _value(self, name: str) -> str:
        control = self.inputs[name]
        if isinstance(control, wx.Choice):
            selection = control.GetSelection()
            if selection == wx.NOT_FOUND:
                return ""
            value = control.GetString(selection)
            return value.lower() if name == "gender" else value
        return control.GetValue()

    def on_submit(self, event):
        form = {name: self._value(name) for name in self.inputs}
        form["user_type"] = self.selected_role.value
        try:
            payload = build_registration_payload(form)
        except DormError as e:
            self.status_text.SetForegroundColour(wx.RED)
            self.status_text.SetLabel(e.message)
            self.panel.Layout()
            return

        self.submit_button.Enable(False)
        self.status_text.SetForegroundColour(wx.Colour(100, 100, 100))
        self.status_text.SetLabel("Creating your account...")
        run_in_background(self.context.session.register, self._on_registered, payload)

    def _on_registered(self, status: str, value: Any):
        self.submit_button.Enable(True)
        if status == "success":
            self.result = value
            self.EndModal(wx.ID_OK)
            return

        self.status_text.SetForegroundColour(wx.RED)
        message = value.message if isinstance(value, DormError) else f"Registration failed: {value}"
        logger.warning(f"Registration failed: {message}")
        self.status_text.SetLabel(message)
        self.panel.Layout()
