import wx

from features.catalog import FormOptions
from features.common.page_view import PageView
from features.common.service import ResourceService


class FormView(PageView):
    """Data-entry page built from the page's declared fields."""

    def build(self):
        self.options: FormOptions = self.page.options["form"]
        self.service = ResourceService(self.context.api)
        self.inputs: dict[str, wx.Window] = {}

        form = wx.FlexGridSizer(0, 2, 12, 15)
        form.AddGrowableCol(1, 1)

        for form_field in self.options.fields:
            label = f"{form_field.label}{' *' if form_field.required else ''}:"
            form.Add(wx.StaticText(self.body, label=label), 0, wx.ALIGN_TOP | wx.TOP, 4)

            if form_field.kind == "choice":
                control = wx.Choice(self.body, choices=[c.title() for c in form_field.choices])
            elif form_field.kind == "multiline":
                control = wx.TextCtrl(self.body, style=wx.TE_MULTILINE, size=wx.Size(-1, 90))
            else:
                control = wx.TextCtrl(self.body)
            self.inputs[form_field.name] = control
            form.Add(control, 1, wx.EXPAND)

        self.body_sizer.Add(form, 0, wx.EXPAND)
        self.body_sizer.AddSpacer(20)

        buttons = wx.BoxSizer(wx.HORIZONTAL)
        buttons.AddStretchSpacer()
        clear_button = wx.Button(self.body, label="Clear")
        clear_button.Bind(wx.EVT_BUTTON, lambda evt: self.clear())
        buttons.Add(clear_button, 0, wx.RIGHT, 10)
        self.submit_button = wx.Button(self.body, label="Submit")
        self.submit_button.Bind(wx.EVT_BUTTON, self.on_submit)
        buttons.Add(self.submit_button, 0)
        self.body_sizer.Add(buttons, 0, wx.EXPAND)

    def refresh(self):
        # nothing to load
        self.body.Show()
        self.Layout()

    def values(self) -> dict[str, str]:
        values = {}
        for form_field in self.options.fields:
            control = self.inputs[form_field.name]
            if isinstance(control, wx.Choice):
                selection = control.GetSelection()
                values[form_field.name] = (
                    form_field.choices[selection] if selection != wx.NOT_FOUND else ""
                )
            else:
                values[form_field.name] = control.GetValue()
        return values

    def clear(self):
        for control in self.inputs.values():
            if isinstance(control, wx.Choice):
                control.SetSelection(wx.NOT_FOUND)
            else:
                control.SetValue("")

    def on_submit(self, event):
        self.submit_button.Enable(False)

        def done(response):
            self.submit_button.Enable(True)
            self.clear()
            self.context.messages.show_success(response.message or self.options.success_message)
            if self.options.success_banner:
                self.context.messages.show_banner(self.options.success_banner, "success")
            if self.options.next_path:
                self.context.router.navigate(self.options.next_path)

        self.run_task(
            self.service.submit_form,
            done,
            self.page,
            self.user,
            self.values(),
            on_error=lambda error: self.submit_button.Enable(True),
        )
