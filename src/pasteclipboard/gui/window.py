"""PasteWindow — GTK4 form that types its text into another window after a delay."""

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gdk, Gtk

from pasteclipboard.config import APP_ID, APP_NAME, MAX_DELAY
from pasteclipboard.dispatcher import DelayedDispatcher, DispatchResult, parse_delay
from pasteclipboard.errors import ConfigSaveFailed, DispatchBusy, InvalidDelay
from pasteclipboard.gui.styles import CSS, STATUS_CLASSES
from pasteclipboard.gui.timer import GLibTimer
from pasteclipboard.output.typer import make_injector
from pasteclipboard.settings import ConfigStore, Settings, settings_from_fields


def _countdown_message(seconds: int) -> str:
    plural = "" if seconds == 1 else "s"
    return f"Typing in {seconds} second{plural}... focus the target window."


class PasteWindow(Gtk.Application):
    def __init__(self, store: ConfigStore, backend: str = "auto"):
        super().__init__(application_id=APP_ID)
        self.store = store
        self.settings = store.load()
        timer = GLibTimer()
        self.dispatcher = DelayedDispatcher(
            injector=make_injector(backend),
            timer=timer,
            on_complete=self._on_complete,
            on_tick=self._on_tick,
            on_fire=self._on_fire,
            background=timer.run_in_thread,
        )

    def do_activate(self):
        provider = Gtk.CssProvider()
        provider.load_from_string(CSS)
        Gtk.StyleContext.add_provider_for_display(
            Gdk.Display.get_default(), provider,
            Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION,
        )

        self.win = Gtk.ApplicationWindow(application=self, title=APP_NAME)
        self.win.set_default_size(560, 420)
        self.win.connect("close-request", self._on_close)

        key_ctrl = Gtk.EventControllerKey()
        key_ctrl.connect("key-pressed", self._on_key)
        self.win.add_controller(key_ctrl)

        box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=8)
        box.add_css_class("container")

        lbl_text = Gtk.Label(label="Input text (typed after delay):")
        lbl_text.add_css_class("field-label")
        lbl_text.set_xalign(0.0)
        box.append(lbl_text)

        scrolled = Gtk.ScrolledWindow(hexpand=True, vexpand=True)
        self.text_view = Gtk.TextView()
        self.text_view.set_wrap_mode(Gtk.WrapMode.WORD_CHAR)
        self.text_view.add_css_class("input-text")
        scrolled.set_child(self.text_view)
        box.append(scrolled)
        self.buffer = self.text_view.get_buffer()
        self.buffer.set_text(self.settings.text)

        # Delay row
        row = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
        row.append(Gtk.Label(label="Delay (seconds):"))
        self.entry_delay = Gtk.Entry()
        self.entry_delay.set_max_length(6)
        self.entry_delay.set_placeholder_text("e.g., 3")
        self.entry_delay.set_text(str(self.settings.delay_seconds))
        self.entry_delay.connect("activate", self._on_start)
        row.append(self.entry_delay)
        box.append(row)

        # Buttons
        buttons = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6, homogeneous=True)
        self.btn_start = Gtk.Button(label="Type After Delay")
        self.btn_start.add_css_class("suggested-action")
        self.btn_start.connect("clicked", self._on_start)
        buttons.append(self.btn_start)
        self.btn_cancel = Gtk.Button(label="Cancel")
        self.btn_cancel.set_sensitive(False)
        self.btn_cancel.connect("clicked", lambda _button: self.dispatcher.cancel())
        buttons.append(self.btn_cancel)
        box.append(buttons)

        self.status_label = Gtk.Label(label="")
        self.status_label.add_css_class("status-label")
        self.status_label.set_xalign(0.0)
        self.status_label.set_wrap(True)
        box.append(self.status_label)

        self.win.set_child(box)
        self.win.present()

    def _current_settings(self) -> Settings | None:
        start, end = self.buffer.get_bounds()
        text = self.buffer.get_text(start, end, True)
        try:
            delay = parse_delay(self.entry_delay.get_text())
        except InvalidDelay:
            return None
        return Settings(text=text, delay_seconds=delay)

    def _on_start(self, _widget):
        settings = self._current_settings()
        if settings is None:
            self._set_status(f"Invalid delay (must be a number from 0-{MAX_DELAY}).", "status-error")
            return

        try:
            self.dispatcher.schedule(settings.text, settings.delay_seconds)
        except DispatchBusy as e:
            self._set_status(str(e), "status-error")
            return

        self._busy(True)
        if settings.delay_seconds > 0:
            self._set_status(_countdown_message(settings.delay_seconds), "status-waiting")
        else:
            self._set_status("Typing now...", "status-waiting")

        self._save(settings)

    def _on_tick(self, remaining: int):
        self._set_status(_countdown_message(remaining), "status-waiting")

    def _on_fire(self, _request):
        self._set_status("Typing now...", "status-waiting")

    def _on_complete(self, result: DispatchResult):
        self._busy(False)
        if result.cancelled:
            self._set_status("Cancelled.", None)
        elif result.error is not None:
            self._set_status(f"Typing failed: {result.error}", "status-error")
        else:
            self._set_status("✓ Done typing.", "status-done")

    def _on_key(self, controller, keyval, keycode, state):
        if keyval == Gdk.KEY_Escape:
            return self.dispatcher.cancel()
        return False

    def _on_close(self, _window):
        self.dispatcher.cancel()
        start, end = self.buffer.get_bounds()
        settings = settings_from_fields(
            self.buffer.get_text(start, end, True), self.entry_delay.get_text(), self.settings,
        )
        if settings != self.settings:
            self._save(settings)
        return False

    def _save(self, settings: Settings):
        try:
            self.store.save(settings)
        except ConfigSaveFailed as e:
            # Keep what we typed for this session even if the disk refuses it.
            self._set_status(f"{self.status_label.get_text()}\n{e}".strip(), "status-error")
        self.settings = settings

    def _busy(self, busy: bool):
        self.btn_start.set_sensitive(not busy)
        self.btn_cancel.set_sensitive(busy)

    def _set_status(self, text: str, css_class: str | None):
        for name in STATUS_CLASSES:
            self.status_label.remove_css_class(name)
        if css_class:
            self.status_label.add_css_class(css_class)
        self.status_label.set_text(text)
