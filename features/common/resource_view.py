from typing import Any

import wx

from features.catalog import ListOptions, RowAction
from features.common.page_view import PageView
from features.common.resources import format_cell, lookup
from features.common.service import ResourceService


class ResourceListView(PageView):
    """Table of rows from one list endpoint, with the page's row actions."""

    def build(self):
        self.options: ListOptions = self.page.options["list"]
        self.service = ResourceService(self.context.api)
        self.rows: list[dict[str, Any]] = []
        self.visible_rows: list[dict[str, Any]] = []
        self.action_buttons: list[tuple[RowAction, wx.Button]] = []

        toolbar = wx.BoxSizer(wx.HORIZONTAL)

        self.search_input = wx.SearchCtrl(self.body, size=wx.Size(320, -1))
        self.search_input.SetDescriptiveText("Filter rows...")
        self.search_input.Bind(wx.EVT_TEXT, self.on_search_changed)
        toolbar.Add(self.search_input, 0, wx.RIGHT, 10)

        toolbar.AddStretchSpacer()

        for action in self.options.actions:
            button = wx.Button(self.body, label=action.label)
            button.Bind(wx.EVT_BUTTON, lambda evt, a=action: self.on_action(a))
            button.Enable(False)
            user = self.user
            button.Show(user is not None and (not action.roles or user.role in action.roles))
            toolbar.Add(button, 0, wx.RIGHT, 8)
            self.action_buttons.append((action, button))

        refresh_button = wx.Button(self.body, label="Refresh")
        refresh_button.Bind(wx.EVT_BUTTON, lambda evt: self.refresh())
        toolbar.Add(refresh_button, 0)

        self.body_sizer.Add(toolbar, 0, wx.EXPAND)
        self.body_sizer.AddSpacer(15)

        self.list_ctrl = wx.ListCtrl(self.body, style=wx.LC_REPORT | wx.LC_SINGLE_SEL | wx.BORDER_SIMPLE)
        for column in self.options.columns:
            self.list_ctrl.AppendColumn(column.title, width=column.width)
        self.list_ctrl.Bind(wx.EVT_LIST_ITEM_SELECTED, self.on_selection_changed)
        self.list_ctrl.Bind(wx.EVT_LIST_ITEM_DESELECTED, self.on_selection_changed)
        self.list_ctrl.Bind(wx.EVT_RIGHT_UP, self.on_list_right_click)
        self.body_sizer.Add(self.list_ctrl, 1, wx.EXPAND)

        self.body_sizer.AddSpacer(10)
        self.records_label = wx.StaticText(self.body, label="")
        self.body_sizer.Add(self.records_label, 0)

    def fetch(self):
        return self.service.load_rows(self.page, self.user)

    def populate(self, rows):
        self.rows = rows
        self.apply_filter()

    def apply_filter(self):
        query = self.search_input.GetValue().strip().lower()
        if query:
            self.visible_rows = [
                row
                for row in self.rows
                if any(query in format_cell(lookup(row, c.key)).lower() for c in self.options.columns)
            ]
        else:
            self.visible_rows = list(self.rows)

        self.list_ctrl.DeleteAllItems()
        for index, row in enumerate(self.visible_rows):
            values = [format_cell(lookup(row, c.key)) for c in self.options.columns]
            self.list_ctrl.Append(values)
            self.list_ctrl.SetItemData(index, index)

        if not self.rows:
            self.records_label.SetLabel(self.options.empty_message)
        else:
            self.records_label.SetLabel(f"Showing {len(self.visible_rows)} of {len(self.rows)} records")
        self.on_selection_changed(None)
        self.body.Layout()

    def on_search_changed(self, event):
        self.apply_filter()

    def selected_row(self):
        index = self.list_ctrl.GetFirstSelected()
        if index == wx.NOT_FOUND or index >= len(self.visible_rows):
            return None
        return self.visible_rows[self.list_ctrl.GetItemData(index)]

    def on_selection_changed(self, event):
        row = self.selected_row()
        user = self.user
        for action, button in self.action_buttons:
            button.Enable(row is not None and user is not None and action.available(user, row))

    def on_action(self, action: RowAction):
        row = self.selected_row()
        if row is None:
            return

        if action.confirm:
            result = wx.MessageBox(action.confirm, action.label, wx.YES_NO | wx.ICON_QUESTION)
            if result != wx.YES:
                return

        if action.asks_reason:
            reason = wx.GetTextFromUser("Reason for rejection:", action.label, parent=self).strip()
            if not reason:
                return
            row = dict(row, reason=reason)

        def done(response):
            self.context.messages.show_success(response.message or action.success)
            self.refresh()

        self.run_task(self.service.run_action, done, action, self.user, row)

    def on_list_right_click(self, event):
        item, flags, col = self.list_ctrl.HitTestSubItem(event.GetPosition())
        if item == wx.NOT_FOUND:
            return

        cell_value = self.list_ctrl.GetItemText(item, col)
        if not cell_value:
            return

        menu = wx.Menu()
        copy_item = menu.Append(
            wx.ID_ANY,
            f"Copy '{cell_value[:30]}{'...' if len(cell_value) > 30 else ''}'",
        )
        self.Bind(wx.EVT_MENU, lambda evt: self._copy_to_clipboard(cell_value), copy_item)

        self.PopupMenu(menu)
        menu.Destroy()

    def _copy_to_clipboard(self, text):
        if wx.TheClipboard.Open():
            wx.TheClipboard.SetData(wx.TextDataObject(text))
            wx.TheClipboard.Close()
