from typing import Any

import wx

from features.common.page_view import PageView
from features.common.resources import extract_items, format_cell
from features.common.service import ResourceService


def _label(key: str) -> str:
    return key.replace("_", " ").title()


class RecordView(PageView):
    """Key/value rendering of a single record, e.g. the student's room."""

    empty_message = "No room has been assigned to you yet."

    def build(self):
        self.service = ResourceService(self.context.api)
        self.grid = wx.FlexGridSizer(0, 2, 10, 20)
        self.grid.AddGrowableCol(1, 1)
        self.body_sizer.Add(self.grid, 0, wx.EXPAND)
        self.empty_text = wx.StaticText(self.body, label=self.empty_message)
        self.body_sizer.Add(self.empty_text, 0, wx.TOP, 10)

    def fetch(self):
        return self.service.load_record(self.page, self.user)

    def populate(self, record):
        self.grid.Clear(delete_windows=True)
        self.empty_text.Show(not record)
        for key, value in (record or {}).items():
            if isinstance(value, list) and value and isinstance(value[0], dict):
                value = ", ".join(format_cell(item) for item in value)
            label = wx.StaticText(self.body, label=f"{_label(key)}:")
            label.SetFont(label.GetFont().Bold())
            self.grid.Add(label, 0, wx.ALIGN_RIGHT)
            self.grid.Add(wx.StaticText(self.body, label=format_cell(value)), 0, wx.EXPAND)
        self.body.Layout()


class ReportView(PageView):
    """One of several server-side reports, picked from a choice control."""

    def build(self):
        self.service = ResourceService(self.context.api)
        self.report_names = list(self.page.options["reports"].reports)

        toolbar = wx.BoxSizer(wx.HORIZONTAL)
        toolbar.Add(wx.StaticText(self.body, label="Report:"), 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 8)
        self.report_choice = wx.Choice(self.body, choices=self.report_names)
        self.report_choice.SetSelection(0)
        self.report_choice.Bind(wx.EVT_CHOICE, lambda evt: self.refresh())
        toolbar.Add(self.report_choice, 0)
        self.body_sizer.Add(toolbar, 0, wx.EXPAND | wx.BOTTOM, 15)

        self.summary = wx.FlexGridSizer(0, 2, 8, 20)
        self.body_sizer.Add(self.summary, 0, wx.EXPAND | wx.BOTTOM, 15)

        self.list_ctrl = wx.ListCtrl(self.body, style=wx.LC_REPORT | wx.BORDER_SIMPLE)
        self.body_sizer.Add(self.list_ctrl, 1, wx.EXPAND)

    @property
    def report_name(self) -> str:
        return self.report_names[max(self.report_choice.GetSelection(), 0)]

    def fetch(self):
        return self.service.load_report(self.page, self.user, self.report_name)

    def populate(self, report: dict[str, Any]):
        self.summary.Clear(delete_windows=True)
        self.list_ctrl.ClearAll()

        table: list[dict[str, Any]] = []
        for key, value in report.items():
            if isinstance(value, list):
                if not table:
                    table = extract_items(value)
                continue
            if isinstance(value, dict):
                value = ", ".join(f"{_label(k)}: {format_cell(v)}" for k, v in value.items())
            self.summary.Add(wx.StaticText(self.body, label=f"{_label(key)}:"), 0)
            self.summary.Add(wx.StaticText(self.body, label=format_cell(value)), 0)

        if table:
            columns = list(table[0])
            for column in columns:
                self.list_ctrl.AppendColumn(_label(column), width=140)
            for row in table:
                self.list_ctrl.Append([format_cell(row.get(column)) for column in columns])
        self.list_ctrl.Show(bool(table))
        self.body.Layout()
