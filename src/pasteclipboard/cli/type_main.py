"""pasteclipboard-type — headless delayed typing from the terminal."""

import argparse
import logging
import signal
import sys

from pasteclipboard.config import config_path
from pasteclipboard.dispatcher import DelayedDispatcher, DispatchResult, parse_delay
from pasteclipboard.errors import ConfigSaveFailed, InjectionError, InvalidDelay
from pasteclipboard.output.typer import available_backends, make_injector, resolve_backend
from pasteclipboard.settings import ConfigStore, Settings


def main():
    parser = argparse.ArgumentParser(description="Type text into the focused window after a delay")
    parser.add_argument("text", nargs="?",
                        help="Text to type (default: last saved text)")
    parser.add_argument("-d", "--delay",
                        help="Seconds to wait before typing (default: last saved delay)")
    parser.add_argument("--backend", default=None,
                        choices=["auto", "xdotool", "wtype", "uinput"],
                        help="Keyboard backend (default: $PASTECLIPBOARD_BACKEND or auto)")
    parser.add_argument("--config", metavar="PATH",
                        help=f"Settings file (default: {config_path()})")
    parser.add_argument("--no-save", action="store_true",
                        help="Don't remember this text and delay")
    parser.add_argument("--check", action="store_true",
                        help="List available keyboard backends and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug output to stderr")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.check:
        found = available_backends()
        print("Available backends:", ", ".join(found) if found else "none")
        return

    store = ConfigStore(args.config)
    saved = store.load()
    text = args.text if args.text is not None else saved.text

    try:
        delay = parse_delay(args.delay) if args.delay is not None else saved.delay_seconds
    except InvalidDelay as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(2)

    if not text:
        print("⚠️  Nothing to type.", file=sys.stderr)
        sys.exit(1)

    try:
        backend = resolve_backend(args.backend)
    except InjectionError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    if not args.no_save:
        try:
            store.save(Settings(text=text, delay_seconds=delay))
        except ConfigSaveFailed as e:
            print(f"⚠️  {e}", file=sys.stderr)

    result = run_dispatch(text, delay, backend)

    if result.cancelled:
        print("⏹️  Cancelled.")
        sys.exit(1)
    if result.error is not None:
        print(f"❌ Typing failed: {result.error}", file=sys.stderr)
        sys.exit(1)
    print("✅ Done typing.")


def run_dispatch(text: str, delay: int, backend: str) -> DispatchResult:
    """Run one dispatch on a GLib main loop; Ctrl+C cancels the countdown."""
    from gi.repository import GLib

    from pasteclipboard.gui.timer import GLibTimer

    loop = GLib.MainLoop()
    outcome: list[DispatchResult] = []

    def on_complete(result: DispatchResult):
        outcome.append(result)
        loop.quit()

    def on_tick(remaining: int):
        print(f"  {remaining}...")

    def on_fire(_request):
        print("⌨️  Typing now...")

    def on_interrupt():
        dispatcher.cancel()
        return GLib.SOURCE_CONTINUE

    timer = GLibTimer()
    dispatcher = DelayedDispatcher(
        injector=make_injector(backend),
        timer=timer,
        on_complete=on_complete,
        on_tick=on_tick,
        on_fire=on_fire,
        background=timer.run_in_thread,
    )
    dispatcher.schedule(text, delay)
    print(f"⏳ Typing in {delay}s with {backend}, focus the target window (Ctrl+C to cancel)")

    sigint = GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signal.SIGINT, on_interrupt)
    try:
        loop.run()
    finally:
        GLib.source_remove(sigint)
    return outcome[0]


if __name__ == "__main__":
    main()
