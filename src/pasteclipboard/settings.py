"""Persist the last-used text and delay to an INI file."""

import configparser
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pasteclipboard.config import (
    CONFIG_SECTION,
    DEFAULT_DELAY,
    DEFAULT_TEXT,
    MAX_DELAY,
    config_path,
)
from pasteclipboard.dispatcher import parse_delay
from pasteclipboard.errors import ConfigLoadDegraded, ConfigSaveFailed, InvalidDelay

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    text: str = DEFAULT_TEXT
    delay_seconds: int = DEFAULT_DELAY


class ConfigStore:
    """Loads and saves :class:`Settings` at a fixed path.

    The file is a one-section INI compatible with earlier releases::

        [settings]
        text = "hello\\nworld"
        delay_seconds = 5

    ``text`` is stored JSON-quoted so newlines and surrounding whitespace
    survive configparser; a bare value written by hand is read verbatim.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else config_path()

    def load(self) -> Settings:
        """Return saved settings, or the defaults if the file is missing or broken."""
        if not self.path.exists():
            log.debug("No config at %s, using defaults", self.path)
            return Settings()

        try:
            return self._read()
        except ConfigLoadDegraded as e:
            log.warning("Ignoring config %s: %s", self.path, e)
            return Settings()

    def save(self, settings: Settings) -> None:
        """Write settings, creating the config directory if needed.

        Raises ConfigSaveFailed; the caller's in-memory settings stay valid.
        """
        parser = _new_parser()
        parser[CONFIG_SECTION] = {
            "text": json.dumps(settings.text),
            "delay_seconds": str(settings.delay_seconds),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                parser.write(f)
        except OSError as e:
            raise ConfigSaveFailed(self.path, e) from e
        log.debug("Saved settings to %s", self.path)

    def _read(self) -> Settings:
        parser = _new_parser()
        try:
            with open(self.path, encoding="utf-8") as f:
                parser.read_file(f)
        except (OSError, UnicodeDecodeError, configparser.Error) as e:
            raise ConfigLoadDegraded(str(e)) from e

        if not parser.has_section(CONFIG_SECTION):
            raise ConfigLoadDegraded(f"missing [{CONFIG_SECTION}] section")
        section = parser[CONFIG_SECTION]

        raw_delay = section.get("delay_seconds")
        if raw_delay is None:
            delay = DEFAULT_DELAY
        else:
            try:
                delay = int(raw_delay.strip())
            except ValueError:
                raise ConfigLoadDegraded(f"delay_seconds is not a number: {raw_delay!r}")
            if not 0 <= delay <= MAX_DELAY:
                raise ConfigLoadDegraded(f"delay_seconds out of range: {delay}")

        return Settings(text=_decode_text(section.get("text")), delay_seconds=delay)


def _new_parser() -> configparser.ConfigParser:
    # Free-form text may contain '%', so no interpolation.
    return configparser.ConfigParser(interpolation=None)


def _decode_text(raw: str | None) -> str:
    if raw is None:
        return DEFAULT_TEXT
    if raw.startswith('"'):
        try:
            value = json.loads(raw)
        except ValueError:
            return raw
        if isinstance(value, str):
            return value
    return raw


def settings_from_fields(text: str, raw_delay: str, last: Settings) -> Settings:
    """Settings for the form as it stands, keeping last's delay if the field is invalid."""
    try:
        delay = parse_delay(raw_delay)
    except InvalidDelay:
        delay = last.delay_seconds
    return Settings(text=text, delay_seconds=delay)
