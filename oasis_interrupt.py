#!/usr/bin/env python3
"""Cooperative cancellation for long oasis searches.

Ctrl+C is latched by a SIGINT handler instead of raising KeyboardInterrupt,
and on a terminal the keys ``q``, ``Q`` and ESC are read without blocking.
The search loop asks :meth:`InterruptController.should_interrupt` every so
often and winds down on its own, so the final statistics are still printed.

Use the controller as a context manager: the terminal mode and the previous
SIGINT handler are restored on the way out whatever happened inside.
"""

from __future__ import annotations

import logging
import os
import signal
import sys

try:
    import termios  # POSIX only
    HAVE_TERMIOS = True
except Exception:
    HAVE_TERMIOS = False

log = logging.getLogger("oasis.interrupt")

CANCEL_KEYS = (b"q", b"Q", b"\x1b")

RUNNING = "running"
CANCELLED = "cancelled"


class InterruptController:
    """Latched cancellation from SIGINT, cancel keys, or :meth:`cancel`."""

    def __init__(self, stdin=None, install_signal: bool = True, keyboard: bool = True):
        self.stdin = sys.stdin if stdin is None else stdin
        self.install_signal = install_signal
        self.keyboard = keyboard
        self.state = RUNNING
        self._signalled = False
        self._fd = None
        self._saved_attrs = None
        self._saved_handler = None
        self._handler_installed = False

    # ── state ────────────────────────────────────────────────────────────────
    @property
    def cancelled(self) -> bool:
        return self.state == CANCELLED

    @property
    def interactive(self) -> bool:
        """True while keystrokes are being polled."""
        return self._saved_attrs is not None

    def cancel(self) -> None:
        self.state = CANCELLED

    def _on_sigint(self, signum, frame) -> None:
        self._signalled = True

    # ── polling ──────────────────────────────────────────────────────────────
    def read_key(self) -> bytes:
        """Return one pending byte from the terminal, or ``b""`` if none."""
        if not self.interactive:
            return b""
        try:
            return os.read(self._fd, 1)
        except OSError as e:
            log.warning("keyboard read failed (%s); keyboard cancel disabled", e)
            self._restore_terminal()
            return b""

    def should_interrupt(self) -> bool:
        if self.cancelled:
            return True
        if self._signalled:
            log.info("SIGINT latched")
            self.cancel()
            return True
        key = self.read_key()
        if key in CANCEL_KEYS:
            log.info("cancel key %r", key)
            self.cancel()
            return True
        return False

    # ── resources ────────────────────────────────────────────────────────────
    def _enable_raw_mode(self) -> None:
        if not (self.keyboard and HAVE_TERMIOS):
            return
        try:
            fd = self.stdin.fileno()
            if not os.isatty(fd):
                return
            saved = termios.tcgetattr(fd)
            raw = termios.tcgetattr(fd)
            raw[3] &= ~(termios.ICANON | termios.ECHO)  # lflag
            raw[6][termios.VMIN] = 0
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
        except (AttributeError, ValueError, OSError, termios.error) as e:
            log.warning("terminal raw mode unavailable (%s); keyboard cancel disabled", e)
            return
        self._fd = fd
        self._saved_attrs = saved
        log.debug("raw mode on fd %d", fd)

    def _restore_terminal(self) -> None:
        if self._saved_attrs is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSAFLUSH, self._saved_attrs)
        except (OSError, termios.error) as e:
            log.error("could not restore terminal settings: %s", e)
        self._saved_attrs = None
        self._fd = None

    def _install_handler(self) -> None:
        if not self.install_signal:
            return
        try:
            self._saved_handler = signal.signal(signal.SIGINT, self._on_sigint)
        except ValueError as e:
            # not the main thread
            log.warning("SIGINT handler not installed (%s)", e)
            return
        self._handler_installed = True

    def _remove_handler(self) -> None:
        if self._handler_installed:
            previous = self._saved_handler
            if previous is None:
                previous = signal.SIG_DFL
            signal.signal(signal.SIGINT, previous)
            self._handler_installed = False

    def __enter__(self) -> "InterruptController":
        self._install_handler()
        self._enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._restore_terminal()
        self._remove_handler()
