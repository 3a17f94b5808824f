"""DelayedDispatcher — type text once a countdown expires, without blocking the UI."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from pasteclipboard.config import MAX_DELAY
from pasteclipboard.errors import DispatchBusy, DispatchFailed, InvalidDelay
from pasteclipboard.states import State

log = logging.getLogger(__name__)


class Timer(Protocol):
    """One-shot timer registered with the caller's event loop."""

    def call_later(self, seconds: float, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


@dataclass(frozen=True)
class DispatchRequest:
    text: str
    delay_seconds: int


@dataclass(frozen=True)
class DispatchResult:
    request: DispatchRequest
    status: State
    error: DispatchFailed | None = None

    @property
    def ok(self) -> bool:
        return self.status == State.IDLE and self.error is None

    @property
    def cancelled(self) -> bool:
        return self.status == State.CANCELLED


def validate_delay(delay_seconds) -> int:
    """Return delay_seconds if it is an int in [0, MAX_DELAY], else raise InvalidDelay."""
    if isinstance(delay_seconds, bool) or not isinstance(delay_seconds, int):
        raise InvalidDelay(delay_seconds, MAX_DELAY)
    if not 0 <= delay_seconds <= MAX_DELAY:
        raise InvalidDelay(delay_seconds, MAX_DELAY)
    return delay_seconds


def parse_delay(raw: str) -> int:
    """Parse the delay field as typed by the user."""
    try:
        value = int(raw.strip())
    except (AttributeError, ValueError):
        raise InvalidDelay(raw, MAX_DELAY) from None
    return validate_delay(value)


class DelayedDispatcher:
    """Single-slot delayed typing.

    ``schedule`` arms a countdown and returns at once; when it runs out the
    injector is called exactly once with the scheduled text. Scheduling again
    while a request is pending cancels the pending one first. The countdown
    is a chain of one-shot timers aimed at whole seconds before a fixed
    deadline, so ``on_tick`` can report the seconds left without drift; only
    one timer is ever registered.

    With ``background`` the injector runs off the loop thread and ``done``
    must be called back on it (see ``GLibTimer.run_in_thread``). Without it
    the injector runs inline.

    All methods must be called from the thread that runs the timer's event
    loop. Nothing here locks.
    """

    def __init__(
        self,
        injector: Callable[[str], None],
        timer: Timer,
        on_complete: Callable[[DispatchResult], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        on_fire: Callable[[DispatchRequest], None] | None = None,
        background: Callable[[Callable[[], None], Callable[[Exception | None], None]], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.injector = injector
        self.timer = timer
        self.on_complete = on_complete
        self.on_tick = on_tick
        self.on_fire = on_fire
        self.background = background
        self.clock = clock
        self._state = State.IDLE
        self._request: DispatchRequest | None = None
        self._remaining = 0
        self._deadline = 0.0
        self._handle = None

    @property
    def state(self) -> State:
        return self._state

    @property
    def pending(self) -> DispatchRequest | None:
        return self._request if self._state == State.SCHEDULED else None

    @property
    def remaining(self) -> int:
        return self._remaining if self._state == State.SCHEDULED else 0

    def schedule(self, text: str, delay_seconds: int) -> DispatchRequest:
        validate_delay(delay_seconds)
        if self._state == State.FIRING:
            raise DispatchBusy("Already typing, try again when it finishes")

        replaced = None
        if self._state == State.SCHEDULED:
            log.debug("Replacing pending request")
            replaced = self._drop_pending()

        request = DispatchRequest(text=text, delay_seconds=delay_seconds)
        self._request = request
        self._remaining = delay_seconds
        self._deadline = self.clock() + delay_seconds
        self._state = State.SCHEDULED
        self._arm()
        log.info("Scheduled %d chars in %ds", len(text), delay_seconds)

        # Only report the replaced request once the new one owns the slot.
        if replaced is not None:
            self._emit(DispatchResult(request=replaced, status=State.CANCELLED))
        return request

    def cancel(self) -> bool:
        """Drop the pending request. Returns False if nothing was pending.

        Typing that has already started is never interrupted.
        """
        if self._state != State.SCHEDULED:
            return False

        request = self._drop_pending()
        log.info("Cancelled pending request")
        self._emit(DispatchResult(request=request, status=State.CANCELLED))
        return True

    def _drop_pending(self) -> DispatchRequest:
        if self._handle is not None:
            self.timer.cancel(self._handle)
            self._handle = None

        request = self._request
        self._state = State.CANCELLED
        self._request = None
        self._remaining = 0
        self._state = State.IDLE
        return request

    def _arm(self):
        target = self._deadline - max(self._remaining - 1, 0)
        self._handle = self.timer.call_later(max(0.0, target - self.clock()), self._on_timer)

    def _on_timer(self):
        self._handle = None
        if self._state != State.SCHEDULED:
            return

        if self._remaining > 0:
            self._remaining -= 1
        if self._remaining > 0:
            self._arm()
            if self.on_tick is not None:
                self.on_tick(self._remaining)
            return

        self._fire()

    def _fire(self):
        request = self._request
        self._state = State.FIRING
        if self.on_fire is not None:
            self.on_fire(request)

        if self.background is None:
            try:
                self.injector(request.text)
            except Exception as e:
                self._finish(request, e)
            else:
                self._finish(request, None)
            return

        self.background(lambda: self.injector(request.text), lambda error: self._finish(request, error))

    def _finish(self, request: DispatchRequest, exc: Exception | None):
        error = None
        if exc is not None:
            log.warning("Typing failed: %s", exc)
            error = DispatchFailed(exc)
            error.__cause__ = exc
        self._state = State.IDLE
        self._request = None
        self._emit(DispatchResult(request=request, status=State.IDLE, error=error))

    def _emit(self, result: DispatchResult):
        if self.on_complete is not None:
            self.on_complete(result)
