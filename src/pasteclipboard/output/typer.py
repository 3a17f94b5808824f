"""Type text into the focused application via virtual keyboard."""

import logging
import os
import shutil
import subprocess
from functools import partial
from typing import Callable

from pasteclipboard.config import BACKEND_ENV, KEY_DELAY_MS
from pasteclipboard.errors import InjectionError

log = logging.getLogger(__name__)

BACKENDS = ("wtype", "xdotool", "uinput")
UINPUT_NODE = "/dev/uinput"


def available_backends() -> list[str]:
    """Backends usable right now, best match for the session first."""
    found = []
    if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wtype"):
        found.append("wtype")
    if os.environ.get("DISPLAY") and shutil.which("xdotool"):
        found.append("xdotool")
    for tool in ("wtype", "xdotool"):
        if tool not in found and shutil.which(tool):
            found.append(tool)
    if os.access(UINPUT_NODE, os.W_OK):
        found.append("uinput")
    return found


def resolve_backend(backend: str | None = None) -> str:
    """Turn "auto" (or None / $PASTECLIPBOARD_BACKEND) into a concrete backend name."""
    backend = (backend or os.environ.get(BACKEND_ENV) or "auto").lower()
    if backend == "auto":
        found = available_backends()
        if not found:
            raise InjectionError(
                "No typing backend found. Install xdotool (X11) or wtype (Wayland), "
                f"or make {UINPUT_NODE} writable."
            )
        return found[0]

    if backend not in BACKENDS:
        raise InjectionError(f"Unknown backend {backend!r} (choose from auto, {', '.join(BACKENDS)})")
    if backend != "uinput" and not shutil.which(backend):
        raise InjectionError(f"{backend} is not installed")
    return backend


def type_text(text: str, backend: str | None = "auto", key_delay_ms: int = KEY_DELAY_MS) -> None:
    """Type text into the focused window using wtype (Wayland), xdotool (X11) or uinput.

    Raises InjectionError if no tool is available or the tool fails.
    """
    if not text:
        return

    name = resolve_backend(backend)
    log.debug("Typing %d chars with %s", len(text), name)

    if name == "uinput":
        from pasteclipboard.output.uinput import type_with_uinput
        type_with_uinput(text, key_delay_ms=key_delay_ms)
        return

    if name == "wtype":
        cmd = ["wtype", "-d", str(key_delay_ms), "--", text]
    else:
        cmd = ["xdotool", "type", "--clearmodifiers", "--delay", str(key_delay_ms), "--", text]

    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise InjectionError(f"{name} is not installed") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise InjectionError(f"{name} failed: {detail}") from e


def make_injector(backend: str | None = "auto", key_delay_ms: int = KEY_DELAY_MS) -> Callable[[str], None]:
    """Bind backend options into a ``str -> None`` callable for the dispatcher."""
    return partial(type_text, backend=backend, key_delay_ms=key_delay_ms)
