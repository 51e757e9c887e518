"""Delivery of the serialized manifest to the parent build tool at process exit.

The parent passes an inherited descriptor number (``-fileno N``). Once armed,
the handoff writes the document to that descriptor exactly once from a
termination callback, then closes it. The callback only writes after a normal
exit: if the interpreter reported an uncaught exception after arming, or the
handoff was abandoned, nothing is written. Write failures are swallowed: at
that point the process is exiting and there is no channel left to report
through; the parent treats missing output as a failure on its own.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from common.logging_utils import extra_context, is_debug_enabled, Timer
from exceptions import HandoffAlreadyArmed

from .serializer import manifest_to_json

if TYPE_CHECKING:  # pragma: no cover
    from .context import ExecutionContext
    from .models import Package

logger = logging.getLogger(__name__)


class HandoffState(Enum):
    """Lifecycle of an exit handoff."""
    UNARMED = "unarmed"
    ARMED = "armed"
    FIRED = "fired"


class ExitHandoff:
    """Single-shot writer of the manifest document to an inherited descriptor."""

    def __init__(
        self,
        context: "ExecutionContext",
        register: Callable[[Callable[[], None]], object] = atexit.register,
    ):
        """Initialize the handoff.

        Args:
            context: Context whose products and errors are serialized on fire.
            register: Termination-callback registrar; ``atexit.register`` by default.
        """
        self._context = context
        self._register = register
        self._package: Optional["Package"] = None
        self._fileno: Optional[int] = None
        self._fault_at_arm: Optional[BaseException] = None
        self.state = HandoffState.UNARMED

    @property
    def package(self) -> Optional["Package"]:
        return self._package

    @property
    def fileno(self) -> Optional[int]:
        return self._fileno

    def arm(self, package: "Package", fileno: int) -> None:
        """Record ``package`` and ``fileno`` and register the exit callback.

        Raises:
            HandoffAlreadyArmed: if called more than once.
        """
        if self.state != HandoffState.UNARMED:
            raise HandoffAlreadyArmed(
                f"Exit handoff already {self.state.value} for package {self._package.name if self._package else None!r}"
            )
        self._package = package
        self._fileno = int(fileno)
        # sys.last_value is set when the interpreter reports an uncaught exception.
        self._fault_at_arm = getattr(sys, "last_value", None)
        self.state = HandoffState.ARMED
        self._register(self.fire)
        if is_debug_enabled(logger):
            logger.debug(
                "Exit handoff armed",
                extra=extra_context(
                    event="handoff_armed",
                    component="handoff",
                    action="arm",
                    target=package.name,
                    fileno=self._fileno,
                ),
            )

    def abandon(self, reason: str = "abandoned") -> None:
        """Move straight to FIRED without writing anything.

        Used when the manifest faulted: a partial package graph must not
        reach the parent.
        """
        if self.state == HandoffState.FIRED:
            return
        self.state = HandoffState.FIRED
        if is_debug_enabled(logger):
            logger.debug(
                "Exit handoff abandoned",
                extra=extra_context(
                    event="handoff_abandoned",
                    component="handoff",
                    action="abandon",
                    outcome=reason,
                    target=self._package.name if self._package else None,
                    fileno=self._fileno,
                ),
            )

    def _faulted(self) -> bool:
        last = getattr(sys, "last_value", None)
        return last is not None and last is not self._fault_at_arm

    def fire(self) -> None:
        """Write the document to the descriptor; no-op unless armed.

        Nothing is written when an uncaught exception was reported since arming.
        """
        if self.state != HandoffState.ARMED or self._package is None or self._fileno is None:
            return
        if self._faulted():
            self.abandon("uncaught_exception")
            return
        # Terminal even on failure: the descriptor is never written twice.
        self.state = HandoffState.FIRED
        with Timer() as t:
            try:
                text = manifest_to_json(self._package, self._context)
                with os.fdopen(self._fileno, "w", encoding="utf-8") as f:
                    f.write(text)
            except (OSError, ValueError) as exc:
                # ValueError covers UnicodeEncodeError from lone surrogates.
                logger.debug("Exit handoff to fd %s abandoned: %s", self._fileno, exc)
                return
        if is_debug_enabled(logger):
            logger.debug(
                "Exit handoff delivered",
                extra=extra_context(
                    event="handoff_fired",
                    component="handoff",
                    action="fire",
                    outcome="success",
                    fileno=self._fileno,
                    duration_ms=t.duration_ms(),
                ),
            )


def deliver_on_exit(package: "Package", fileno: int, context: Optional["ExecutionContext"] = None) -> ExitHandoff:
    """Arm the handoff of ``context`` (the active one by default) for ``package``."""
    if context is None:
        from .context import current_context  # pylint: disable=import-outside-toplevel
        context = current_context()
    context.handoff.arm(package, fileno)
    return context.handoff
