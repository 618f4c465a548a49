"""Cleanup registry for process shutdown.

Collects teardown actions (temp files, directories, locks, commands) while
a fleet script runs and executes them exactly once, newest first, when the
process exits normally or is terminated by SIGTERM, SIGINT or SIGHUP.

The registry is owned by the process entry point and handed to whatever
needs to register cleanups:

    with CleanupRegistry() as registry:
        lock = acquire_lock(path)
        registry.register_lock(lock.path)
        ...

Cleanup actions are best-effort. Failures are logged at debug level and
never change the exit code the process was already going to exit with.
"""

import atexit
import logging
import shutil
import signal
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from types import FrameType, TracebackType
from typing import Any

from ..constants import CLEANUP_COMMAND_TIMEOUT, SHUTDOWN_SIGNALS
from ..models import CleanupItem, CleanupKind
from ..services import run_command

logger = logging.getLogger(__name__)

CleanupHook = Callable[[int], None]


def exit_code_for(exc: BaseException | None) -> int:
    """Exit code the interpreter would report for an in-flight exception."""
    if exc is None:
        return 0
    if isinstance(exc, SystemExit):
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    if isinstance(exc, KeyboardInterrupt):
        return 128 + signal.SIGINT
    return 1


def _remove_file(path: Path) -> None:
    if path.is_file():
        path.unlink()


def _remove_directory(path: Path) -> None:
    if not path.is_dir():
        return
    if path.is_symlink():
        path.unlink()
    else:
        shutil.rmtree(path)


class CleanupRegistry:
    """Process-scoped stack of pending cleanup actions."""

    def __init__(
        self,
        command_timeout: float = CLEANUP_COMMAND_TIMEOUT,
        signals: Iterable[int] = SHUTDOWN_SIGNALS,
    ) -> None:
        self.command_timeout = command_timeout
        self.signals = tuple(signals)
        self.exit_code: int | None = None
        self._items: list[CleanupItem] = []
        self._hook: CleanupHook | None = None
        self._draining = threading.Lock()
        self._installed = False
        self._previous_handlers: dict[int, Any] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, kind: CleanupKind | str, target: str | Path) -> CleanupItem:
        """Push a cleanup action onto the stack.

        The target is not checked here; missing targets are skipped at
        drain time.

        Raises:
            ValueError: If kind is unknown or target is empty
        """
        item = CleanupItem(kind=CleanupKind(kind), target=str(target))
        if self.draining:
            logger.warning(
                "Cleanup already ran, %s %s will not be cleaned up", item.kind.value, item.target
            )
        self._items.append(item)
        logger.debug("Registered cleanup: %s %s", item.kind.value, item.target)
        return item

    def register_file(self, path: str | Path) -> CleanupItem:
        return self.register(CleanupKind.FILE, path)

    def register_directory(self, path: str | Path) -> CleanupItem:
        return self.register(CleanupKind.DIRECTORY, path)

    def register_lock(self, path: str | Path) -> CleanupItem:
        return self.register(CleanupKind.LOCK, path)

    def register_command(self, command: str) -> CleanupItem:
        return self.register(CleanupKind.COMMAND, command)

    def set_cleanup_hook(self, hook: CleanupHook | None) -> None:
        """Set a callback invoked with the exit code after the drain.

        Under the ``with CleanupRegistry()`` form the callback gets the real
        exit code. When the drain runs from the atexit callback the
        interpreter does not expose its exit status, so the callback gets
        the last code passed to ``drain``, or 0.
        """
        self._hook = hook

    @property
    def items(self) -> tuple[CleanupItem, ...]:
        """Pending items in registration order."""
        return tuple(self._items)

    @property
    def draining(self) -> bool:
        return self._draining.locked()

    def __len__(self) -> int:
        return len(self._items)

    # ------------------------------------------------------------------
    # Shutdown interception
    # ------------------------------------------------------------------

    def install_shutdown_handler(self) -> None:
        """Drain on normal exit and on shutdown signals. Safe to call twice."""
        if self._installed:
            return

        if threading.current_thread() is threading.main_thread():
            for sig in self.signals:
                self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)
        else:
            logger.debug("Not on main thread, signal handlers not installed")

        atexit.register(self._on_exit)
        self._installed = True

    def uninstall_shutdown_handler(self) -> None:
        """Restore the signal handlers that were active before installation."""
        if not self._installed:
            return

        if threading.current_thread() is threading.main_thread():
            for sig, handler in self._previous_handlers.items():
                signal.signal(sig, handler)
        self._previous_handlers.clear()
        atexit.unregister(self._on_exit)
        self._installed = False

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        if self.draining:
            # Signal was pending when the drain started; the drain finishes the job
            return
        logger.info("Received %s, cleaning up...", signal.Signals(signum).name)
        self.shutdown(128 + signum)

    def _on_exit(self) -> None:
        self.drain(self.exit_code if self.exit_code is not None else 0)

    def _ignore_signals(self) -> None:
        if not self._installed or threading.current_thread() is not threading.main_thread():
            return
        for sig in self.signals:
            signal.signal(sig, signal.SIG_IGN)

    # ------------------------------------------------------------------
    # Drain
    # ------------------------------------------------------------------

    def drain(self, exit_code: int = 0) -> int:
        """Run all pending cleanups, newest first, exactly once.

        Args:
            exit_code: Exit code the process is about to exit with

        Returns:
            The exit code captured by the first drain, unchanged by cleanup
        """
        # Disarm before taking the flag: a signal landing after the flag is
        # set must not interrupt the drain
        self._ignore_signals()
        if not self._draining.acquire(blocking=False):
            return self.exit_code if self.exit_code is not None else exit_code

        self.exit_code = exit_code

        while self._items:
            self._run_item(self._items.pop())

        if self._hook is not None:
            try:
                self._hook(exit_code)
            except Exception:
                logger.debug("Cleanup hook failed", exc_info=True)

        return exit_code

    def shutdown(self, exit_code: int) -> None:
        """Drain, then terminate with the captured exit code."""
        raise SystemExit(self.drain(exit_code))

    def _run_item(self, item: CleanupItem) -> None:
        logger.debug("Cleanup: %s %s", item.kind.value, item.target)
        try:
            if item.kind is CleanupKind.FILE:
                _remove_file(Path(item.target))
            elif item.kind in (CleanupKind.DIRECTORY, CleanupKind.LOCK):
                _remove_directory(Path(item.target))
            else:
                result = run_command(item.target, timeout=self.command_timeout)
                if not result.ok:
                    logger.debug(
                        "Cleanup command exited %d: %s", result.returncode, item.target
                    )
        except Exception as e:
            logger.debug("Cleanup %s %s failed: %s", item.kind.value, item.target, e)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "CleanupRegistry":
        self.install_shutdown_handler()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        try:
            self.drain(exit_code_for(exc))
        finally:
            self.uninstall_shutdown_handler()
        return False
