"""Kernel-level typing through a virtual uinput keyboard (ASCII, US layout).

Works on X11 and Wayland alike, at the cost of needing write access to
/dev/uinput. Characters outside the key map are skipped.
"""

import errno
import logging
import string
import time

from pasteclipboard.config import KEY_DELAY_MS, UINPUT_DEVICE_NAME, UINPUT_SETTLE_MS
from pasteclipboard.errors import InjectionError

log = logging.getLogger(__name__)

_SHIFTED_DIGITS = ")!@#$%^&*("

_PUNCTUATION = {
    "-": ("KEY_MINUS", "_"),
    "=": ("KEY_EQUAL", "+"),
    "[": ("KEY_LEFTBRACE", "{"),
    "]": ("KEY_RIGHTBRACE", "}"),
    "\\": ("KEY_BACKSLASH", "|"),
    ";": ("KEY_SEMICOLON", ":"),
    "'": ("KEY_APOSTROPHE", '"'),
    "`": ("KEY_GRAVE", "~"),
    ",": ("KEY_COMMA", "<"),
    ".": ("KEY_DOT", ">"),
    "/": ("KEY_SLASH", "?"),
}


def _build_keymap() -> dict[str, tuple[str, bool]]:
    keymap = {}
    for c in string.ascii_lowercase:
        keymap[c] = (f"KEY_{c.upper()}", False)
        keymap[c.upper()] = (f"KEY_{c.upper()}", True)
    for digit, shifted in zip(string.digits, _SHIFTED_DIGITS):
        keymap[digit] = (f"KEY_{digit}", False)
        keymap[shifted] = (f"KEY_{digit}", True)
    for plain, (key, shifted) in _PUNCTUATION.items():
        keymap[plain] = (key, False)
        keymap[shifted] = (key, True)
    keymap[" "] = ("KEY_SPACE", False)
    keymap["\n"] = ("KEY_ENTER", False)
    keymap["\t"] = ("KEY_TAB", False)
    return keymap


# char -> (evdev key name, needs shift)
KEYMAP = _build_keymap()


def key_sequence(text: str) -> list[tuple[str, bool]]:
    """Map text to (key name, shift) pairs, dropping characters we cannot type."""
    keys = []
    for c in text:
        if c in KEYMAP:
            keys.append(KEYMAP[c])
        else:
            log.debug("Skipping untypeable character %r", c)
    return keys


def type_with_uinput(text: str, key_delay_ms: int = KEY_DELAY_MS) -> None:
    """Create a virtual keyboard, type text on it, then remove it."""
    from evdev import UInput, ecodes
    from evdev.uinput import UInputError

    keys = key_sequence(text)
    if not keys:
        return

    codes = sorted({ecodes.ecodes[name] for name, _ in KEYMAP.values()})
    shift = ecodes.KEY_LEFTSHIFT

    try:
        device = UInput({ecodes.EV_KEY: codes + [shift]}, name=UINPUT_DEVICE_NAME)
    except (OSError, UInputError) as e:
        raise InjectionError(_device_error_message(e)) from e

    try:
        time.sleep(UINPUT_SETTLE_MS / 1000)
        for name, needs_shift in keys:
            code = ecodes.ecodes[name]
            if needs_shift:
                device.write(ecodes.EV_KEY, shift, 1)
                device.syn()
            device.write(ecodes.EV_KEY, code, 1)
            device.syn()
            device.write(ecodes.EV_KEY, code, 0)
            device.syn()
            if needs_shift:
                device.write(ecodes.EV_KEY, shift, 0)
                device.syn()
            time.sleep(key_delay_ms / 1000)
    except OSError as e:
        raise InjectionError(f"Writing to the virtual keyboard failed: {e}") from e
    finally:
        device.close()


def _device_error_message(e: Exception) -> str:
    err = getattr(e, "errno", None)
    if err == errno.ENOENT:
        return "Failed to create uinput device. Is the 'uinput' kernel module loaded?"
    if err in (errno.EACCES, errno.EPERM):
        return "Failed to create uinput device. Do you have permissions for /dev/uinput?"
    return f"Failed to create uinput device: {e}"
