"""One-shot timers and background work on the GLib main loop."""

import threading

from gi.repository import GLib


class GLibTimer:
    """Timer for DelayedDispatcher backed by GLib timeout sources."""

    def __init__(self):
        self._live: set[int] = set()

    def call_later(self, seconds: float, callback) -> int:
        source_id = 0

        def _run():
            self._live.discard(source_id)
            callback()
            return GLib.SOURCE_REMOVE

        if seconds > 0:
            source_id = GLib.timeout_add(int(seconds * 1000), _run)
        else:
            source_id = GLib.idle_add(_run)
        self._live.add(source_id)
        return source_id

    def cancel(self, handle: int) -> None:
        # Removing a source that already fired makes GLib print a critical.
        if handle in self._live:
            self._live.discard(handle)
            GLib.source_remove(handle)

    def run_in_thread(self, work, done) -> None:
        """Run work() on a daemon thread, then done(error_or_None) on the main loop."""

        def _worker():
            error = None
            try:
                work()
            except Exception as e:
                error = e

            def _deliver():
                done(error)
                return GLib.SOURCE_REMOVE

            GLib.idle_add(_deliver)

        threading.Thread(target=_worker, daemon=True).start()
