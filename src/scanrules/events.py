# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fire-and-forget notification channel shared by engines and the catalog."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from threading import Lock

from .logging import fail, info, warn

LOGGER = logging.getLogger(__name__)


class Channel(str, Enum):
    """Enumerate notification channels, ordered loosely by visibility."""

    WARNING_ALWAYS = "warning-always"
    WARNING_VERBOSE = "warning-verbose"
    INFO_ALWAYS = "info-always"
    INFO_VERBOSE = "info-verbose"
    ERROR_VERBOSE = "error-verbose"

    @property
    def verbose_only(self) -> bool:
        """Return ``True`` when the channel is hidden unless verbose output is on."""

        return self.value.endswith("-verbose")


Listener = Callable[[Channel, str], None]


class NotificationSink:
    """Publish ``(channel, message)`` pairs to every subscribed listener.

    Emission is fire-and-forget: nothing is queued, acknowledged, or retried.
    A listener that raises is logged and skipped; the remaining listeners
    still run and the publisher never sees the error. With no listeners
    attached, messages are only traced through :mod:`logging`.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = Lock()

    def subscribe(self, listener: Listener) -> None:
        """Attach ``listener`` so it receives every subsequent notification."""

        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Detach ``listener``; unknown listeners are ignored."""

        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def emit(self, channel: Channel, message: str) -> None:
        """Deliver ``message`` on ``channel`` to the current listeners.

        Args:
            channel: Channel describing the visibility of the notification.
            message: Human-readable single line message.
        """

        LOGGER.debug("notification [%s] %s", channel.value, message)
        with self._lock:
            listeners = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(channel, message)
            except Exception:
                LOGGER.exception("notification listener %r failed on [%s] %s", listener, channel.value, message)


class ConsoleListener:
    """Render notifications to the Rich console using :mod:`scanrules.logging`."""

    def __init__(self, *, verbose: bool = False, use_emoji: bool = True) -> None:
        self.verbose = verbose
        self.use_emoji = use_emoji

    def __call__(self, channel: Channel, message: str) -> None:
        if channel.verbose_only and not self.verbose:
            return
        if channel in (Channel.WARNING_ALWAYS, Channel.WARNING_VERBOSE):
            warn(message, use_emoji=self.use_emoji)
        elif channel is Channel.ERROR_VERBOSE:
            fail(message, use_emoji=self.use_emoji)
        else:
            info(message, use_emoji=self.use_emoji)


def attach_console(sink: NotificationSink, *, verbose: bool = False, use_emoji: bool = True) -> ConsoleListener:
    """Subscribe a :class:`ConsoleListener` to ``sink`` and return it."""

    listener = ConsoleListener(verbose=verbose, use_emoji=use_emoji)
    sink.subscribe(listener)
    return listener


DEFAULT_SINK = NotificationSink()


__all__ = [
    "Channel",
    "ConsoleListener",
    "DEFAULT_SINK",
    "Listener",
    "NotificationSink",
    "attach_console",
]
