from pathlib import Path

import wx

from features.common.page_view import PageView
from features.common.resources import format_cell, lookup

from .service import AllocationResult, AllocationService

STAT_LABELS = (
    ("pending_applications", "Pending Applications"),
    ("approved_applications", "Approved Applications"),
    ("available_rooms", "Available Rooms"),
    ("occupancy_rate", "Occupancy Rate"),
)
COLUMNS = (
    ("student.name", "Student", 180),
    ("room.room_number", "Room", 90),
    ("room.block.name", "Block", 120),
    ("allocated_at", "Allocated", 160),
    ("status", "Status", 100),
)


class AllocationsView(PageView):
    def build(self):
        self.service = AllocationService(self.context.api)

        self.stats_sizer = wx.FlexGridSizer(1, len(STAT_LABELS) * 2, 0, 12)
        self.stat_values: dict[str, wx.StaticText] = {}
        for key, label in STAT_LABELS:
            self.stats_sizer.Add(wx.StaticText(self.body, label=f"{label}:"), 0, wx.ALIGN_CENTER_VERTICAL)
            value = wx.StaticText(self.body, label="-")
            value.SetFont(value.GetFont().Bold())
            self.stat_values[key] = value
            self.stats_sizer.Add(value, 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 20)
        self.body_sizer.Add(self.stats_sizer, 0, wx.BOTTOM, 20)

        buttons = wx.BoxSizer(wx.HORIZONTAL)
        self.auto_button = wx.Button(self.body, label="Run Auto Allocation")
        self.auto_button.Bind(wx.EVT_BUTTON, self.on_auto_allocate)
        buttons.Add(self.auto_button, 0, wx.RIGHT, 10)

        self.reallocate_button = wx.Button(self.body, label="Re-allocate")
        self.reallocate_button.Bind(wx.EVT_BUTTON, self.on_reallocate)
        buttons.Add(self.reallocate_button, 0, wx.RIGHT, 10)

        buttons.AddStretchSpacer()
        export_button = wx.Button(self.body, label="Export Report...")
        export_button.Bind(wx.EVT_BUTTON, self.on_export)
        buttons.Add(export_button, 0)
        self.body_sizer.Add(buttons, 0, wx.EXPAND | wx.BOTTOM, 15)

        self.list_ctrl = wx.ListCtrl(self.body, style=wx.LC_REPORT | wx.BORDER_SIMPLE)
        for _key, title, width in COLUMNS:
            self.list_ctrl.AppendColumn(title, width=width)
        self.body_sizer.Add(self.list_ctrl, 1, wx.EXPAND)

    def fetch(self):
        return self.service.get_stats(), self.service.get_allocations()

    def populate(self, data):
        stats, allocations = data
        for key, text in self.stat_values.items():
            value = format_cell(stats.get(key, "-"))
            text.SetLabel(f"{value}%" if key == "occupancy_rate" and value != "-" else value)

        self.list_ctrl.DeleteAllItems()
        for row in allocations:
            self.list_ctrl.Append([format_cell(lookup(row, key)) for key, _title, _width in COLUMNS])
        self.body.Layout()

    def _set_running(self, running: bool):
        self.auto_button.Enable(not running)
        self.reallocate_button.Enable(not running)

    def _run(self, label: str, work):
        result = wx.MessageBox(
            f"{label} will change room assignments. Continue?",
            label,
            wx.YES_NO | wx.ICON_QUESTION,
        )
        if result != wx.YES:
            return

        self._set_running(True)
        self.run_task(work, self._on_result, on_error=lambda error: self._set_running(False))

    def on_auto_allocate(self, event):
        self._run("Auto allocation", self.service.auto_allocate)

    def on_reallocate(self, event):
        self._run("Re-allocation", self.service.reallocate)

    def _on_result(self, result: AllocationResult):
        self._set_running(False)
        if result.success:
            self.context.messages.show_success(
                f"{result.message} ({result.allocated} allocated, {result.failed} failed)"
            )
            self.refresh()
        else:
            self.context.messages.show_error(result.message)

    def on_export(self, event):
        with wx.FileDialog(
            self,
            "Export allocation report",
            defaultFile="allocation_report.csv",
            wildcard="CSV files (*.csv)|*.csv|JSON files (*.json)|*.json",
            style=wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT,
        ) as dialog:
            if dialog.ShowModal() == wx.ID_CANCEL:
                return
            destination = Path(dialog.GetPath())

        self.run_task(
            self.service.export_report,
            lambda path: self.context.messages.show_success(f"Report saved to {path}"),
            destination,
        )
