import wx
import wx.adv

from base.auth.user_details_dialog import UserDetailsDialog


class AppMenuBar:
    """Frame menu bar. Every action is delegated to the shell window."""

    def __init__(self, shell, current_user):
        self.shell = shell
        self.current_user = current_user
        self.menu_bar = wx.MenuBar()
        self._create_menus()
        shell.SetMenuBar(self.menu_bar)

    def _create_menus(self):
        self._create_file_menu()
        self._create_view_menu()
        self._create_account_menu()
        self._create_help_menu()

    def _create_file_menu(self):
        file_menu = wx.Menu()

        exit_item = file_menu.Append(wx.ID_EXIT, "Exit", "Exit the application")
        self.shell.Bind(wx.EVT_MENU, self._on_exit, exit_item)

        self.menu_bar.Append(file_menu, "File")

    def _create_view_menu(self):
        view_menu = wx.Menu()

        home_item = view_menu.Append(wx.ID_HOME, "Dashboard\tCtrl+H", "Go to the dashboard")
        self.shell.Bind(wx.EVT_MENU, lambda evt: self.shell.go_home(), home_item)

        refresh_item = view_menu.Append(wx.ID_REFRESH, "Refresh\tF5", "Reload the current page")
        self.shell.Bind(wx.EVT_MENU, lambda evt: self.shell.refresh_page(), refresh_item)

        view_menu.AppendSeparator()

        banner_item = view_menu.Append(wx.ID_ANY, "Show Welcome Banner", "Show the role welcome banner")
        self.shell.Bind(wx.EVT_MENU, lambda evt: self.shell.show_welcome_banner(), banner_item)

        self.menu_bar.Append(view_menu, "View")

    def _create_account_menu(self):
        account_menu = wx.Menu()

        user_name_item = account_menu.Append(wx.ID_ANY, self.current_user.name, "Current user")
        user_name_item.Enable(False)

        account_menu.AppendSeparator()

        details_item = account_menu.Append(wx.ID_ANY, "Details", "View account details")
        self.shell.Bind(wx.EVT_MENU, self._on_details, details_item)

        refresh_item = account_menu.Append(wx.ID_ANY, "Refresh Profile", "Reload your profile from the server")
        self.shell.Bind(wx.EVT_MENU, lambda evt: self.shell.refresh_profile(), refresh_item)

        logout_item = account_menu.Append(wx.ID_ANY, "Logout\tCtrl+L", "Logout from the application")
        self.shell.Bind(wx.EVT_MENU, self._on_logout, logout_item)

        self.menu_bar.Append(account_menu, "Account")

    def _create_help_menu(self):
        help_menu = wx.Menu()

        about_item = help_menu.Append(wx.ID_ABOUT, "About", "About Smart DMS")
        self.shell.Bind(wx.EVT_MENU, self._show_about, about_item)

        self.menu_bar.Append(help_menu, "Help")

    def _show_about(self, event):
        from base.__version__ import __version__
        info = wx.adv.AboutDialogInfo()
        info.SetName("Smart DMS")
        info.SetVersion(__version__)
        info.SetDescription("Smart Dormitory Management System desktop client")
        wx.adv.AboutBox(info)

    def _on_details(self, event):
        dialog = UserDetailsDialog(self.shell, self.current_user)
        dialog.ShowModal()
        dialog.Destroy()

    def _on_logout(self, event):
        result = wx.MessageBox(
            "Are you sure you want to logout?",
            "Confirm Logout",
            wx.YES_NO | wx.ICON_QUESTION
        )

        if result == wx.YES:
            self.shell.logout()

    def _on_exit(self, event):
        self.shell.Close()
