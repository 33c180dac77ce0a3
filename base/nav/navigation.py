from typing import Callable, Optional

import wx
import wx.lib.agw.customtreectrl as CT

from base import get_logger
from base.auth.models import User
from base.nav.menu import NavItem, build_navigation

logger = get_logger(__name__)


class AccordionNavigation(wx.Panel):
    """Navigation panel using CustomTreeCtrl for accordion-like behavior"""

    def __init__(self, parent, on_navigation_clicked: Optional[Callable[[str], None]] = None):
        super().__init__(parent)
        self.on_navigation_clicked = on_navigation_clicked
        self.items_by_path: dict[str, CT.GenericTreeItem] = {}
        self.setup_ui()

    def setup_ui(self):
        sizer = wx.BoxSizer(wx.VERTICAL)

        title_panel = wx.Panel(self)
        title_sizer = wx.BoxSizer(wx.VERTICAL)

        title_label = wx.StaticText(title_panel, label="Smart DMS")
        title_font = title_label.GetFont()
        title_font.PointSize = 16
        title_font = title_font.Bold()
        title_label.SetFont(title_font)
        title_sizer.Add(title_label, 0, wx.LEFT | wx.TOP, 16)

        self.subtitle_label = wx.StaticText(title_panel, label="Dormitory Management")
        subtitle_font = self.subtitle_label.GetFont()
        subtitle_font.PointSize = 9
        self.subtitle_label.SetFont(subtitle_font)
        title_sizer.Add(self.subtitle_label, 0, wx.LEFT | wx.BOTTOM, 16)

        title_panel.SetSizer(title_sizer)
        sizer.Add(title_panel, 0, wx.EXPAND)

        line = wx.StaticLine(self)
        sizer.Add(line, 0, wx.EXPAND)

        self.tree = CT.CustomTreeCtrl(
            self,
            agwStyle=(
                wx.TR_DEFAULT_STYLE
                | wx.TR_HIDE_ROOT
                | wx.TR_NO_LINES
                | CT.TR_HAS_VARIABLE_ROW_HEIGHT
            ),
        )
        self.tree.Bind(wx.EVT_TREE_ITEM_ACTIVATED, self.on_item_activated)
        sizer.Add(self.tree, 1, wx.EXPAND)

        self.SetSizer(sizer)
        self.SetMinSize((260, -1))
        self.SetMaxSize((320, -1))

    def load_for(self, user: Optional[User]):
        """Rebuild the tree with the entries the user's role may see."""
        self.tree.DeleteAllItems()
        self.items_by_path.clear()
        root = self.tree.AddRoot("Root")

        if user is None:
            self.subtitle_label.SetLabel("Not signed in")
            return

        self.subtitle_label.SetLabel(f"{user.role.value.title()} Portal")
        entries = build_navigation(user.role)
        for entry in entries:
            self._append(root, entry)

        self.tree.ExpandAll()
        logger.info(f"Navigation built for {user.role.value} with {len(entries)} entries")

    def _append(self, parent, entry: NavItem):
        item = self.tree.AppendItem(parent, entry.title, data=entry.path)
        font = self.tree.GetItemFont(item)
        if entry.is_group:
            font.PointSize = 10
            font = font.Bold()
            self.tree.SetItemFont(item, font)
            for child in entry.children:
                self._append(item, child)
        else:
            font.PointSize = 9
            self.tree.SetItemFont(item, font)
            self.items_by_path.setdefault(entry.path, item)

    def select_path(self, path: str):
        item = self.items_by_path.get(path)
        if item is not None and self.tree.GetSelection() != item:
            self.tree.SelectItem(item)

    def on_item_activated(self, event):
        item = event.GetItem()
        if item and self.tree.GetItemData(item):
            path = self.tree.GetItemData(item)
            logger.debug(f"Navigation clicked: {path}")
            if self.on_navigation_clicked:
                self.on_navigation_clicked(path)
