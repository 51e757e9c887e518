"""Execution context for one manifest evaluation.

Holds the state a build script accumulates while it runs: diagnostics,
declared products, the exit handoff, and the hook invoked when a ``Package``
is constructed. The active context lives in a ``ContextVar`` so separate
evaluations never share state.
"""

from __future__ import annotations

import atexit
import contextvars
import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional, Sequence

from args import find_fileno
from config import load_config

from .errors import ErrorSink
from .handoff import ExitHandoff

if TYPE_CHECKING:  # pragma: no cover
    from .models import Package, Product

logger = logging.getLogger(__name__)

PackageHook = Callable[["ExecutionContext", "Package"], None]


class ExecutionContext:
    """State owned by a single manifest evaluation."""

    def __init__(
        self,
        on_package: Optional[PackageHook] = None,
        register: Callable[[Callable[[], None]], object] = atexit.register,
    ):
        """Initialize the context.

        Args:
            on_package: Hook called with this context and every constructed Package; None for no side effects.
            register: Termination-callback registrar handed to the exit handoff.
        """
        self.errors = ErrorSink()
        self.products: List["Product"] = []
        self.handoff = ExitHandoff(self, register=register)
        self.on_package = on_package

    def package_created(self, package: "Package") -> None:
        if self.on_package is not None:
            self.on_package(self, package)

    def add_error(self, message: str) -> None:
        self.errors.add(message)

    def add_product(self, product: "Product") -> None:
        self.products.append(product)


def arm_first_package(fileno: int) -> PackageHook:
    """Hook arming the handoff for the first (outermost) package only.

    Packages built afterwards, for instance by helper code in the script, are
    ignored rather than re-arming.
    """
    def hook(ctx: ExecutionContext, package: "Package") -> None:
        if ctx.handoff.package is not None:
            logger.debug("Ignoring additional package %r; handoff already armed", package.name)
            return
        ctx.handoff.arm(package, fileno)
    return hook


_default_context: Optional[ExecutionContext] = None
_active: contextvars.ContextVar[Optional[ExecutionContext]] = contextvars.ContextVar(
    "pkgdesc_execution_context", default=None
)


def default_context_from_argv(
    argv: Optional[Sequence[str]] = None,
    register: Callable[[Callable[[], None]], object] = atexit.register,
) -> ExecutionContext:
    """Build the process default context.

    When ``argv`` carries ``-fileno N`` (a script run directly by the build
    tool), the context arms the handoff for the first package constructed.
    Otherwise package construction has no side effects. A ``fileno_flag`` in
    the file named by ``PKGDESC_CONFIG`` renames the flag.
    """
    flag = load_config().get("fileno_flag")
    fileno = find_fileno(sys.argv if argv is None else argv, flag=flag)
    if fileno is None:
        return ExecutionContext(register=register)
    return ExecutionContext(on_package=arm_first_package(fileno), register=register)


def current_context() -> ExecutionContext:
    """Return the active context, creating the process default on first use."""
    global _default_context  # pylint: disable=global-statement
    ctx = _active.get()
    if ctx is not None:
        return ctx
    if _default_context is None:
        _default_context = default_context_from_argv()
    return _default_context


@contextmanager
def use_context(ctx: ExecutionContext) -> Iterator[ExecutionContext]:
    """Activate ``ctx`` for the duration of the block."""
    token = _active.set(ctx)
    try:
        yield ctx
    finally:
        _active.reset(token)


def add_error(message: str) -> None:
    """Add a diagnostic to the active context."""
    current_context().add_error(message)


def add_product(product: "Product") -> None:
    """Declare a product in the active context."""
    current_context().add_product(product)
