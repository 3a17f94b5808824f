"""pasteclipboard — GTK4 window that types text after a delay."""

import argparse
import logging

from pasteclipboard.config import config_path


def main():
    parser = argparse.ArgumentParser(description="Type text into the focused window after a delay")
    parser.add_argument("--backend", default=None,
                        choices=["auto", "xdotool", "wtype", "uinput"],
                        help="Keyboard backend (default: $PASTECLIPBOARD_BACKEND or auto)")
    parser.add_argument("--config", metavar="PATH",
                        help=f"Settings file (default: {config_path()})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug output to stderr")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    from pasteclipboard.gui.window import PasteWindow
    from pasteclipboard.settings import ConfigStore

    app = PasteWindow(store=ConfigStore(args.config), backend=args.backend)
    app.run([])


if __name__ == "__main__":
    main()
