"""Error types raised across PasteClipboard."""


class PasteClipboardError(Exception):
    """Base class for all PasteClipboard errors."""


class InvalidDelay(PasteClipboardError, ValueError):
    """Delay is not a whole number of seconds within the allowed range."""

    def __init__(self, value, maximum: int):
        self.value = value
        self.maximum = maximum
        super().__init__(f"Invalid delay {value!r} (must be a number from 0-{maximum})")


class ConfigLoadDegraded(PasteClipboardError):
    """Config file exists but could not be understood; defaults apply."""


class ConfigSaveFailed(PasteClipboardError):
    """Settings could not be written to disk."""

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not save settings to {path}: {cause}")


class InjectionError(PasteClipboardError, RuntimeError):
    """A keyboard backend could not deliver the keystrokes."""


class DispatchFailed(PasteClipboardError):
    """A scheduled dispatch reached the injector but typing failed."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(str(cause))


class DispatchBusy(PasteClipboardError):
    """Schedule was requested while text is being typed."""
