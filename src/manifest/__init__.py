"""Package description object model.

A build script imports from here to describe its package::

    from manifest import Package, Dependency, Target

    package = Package(
        name="Example",
        dependencies=[Dependency.package(url="https://example.com/dep", major_version=1)],
    )
"""

from .context import (
    ExecutionContext,
    add_error,
    add_product,
    arm_first_package,
    current_context,
    use_context,
)
from .errors import ErrorSink
from .handoff import ExitHandoff, HandoffState, deliver_on_exit
from .models import (
    Dependency,
    Package,
    Product,
    SystemPackageProvider,
    Target,
    TargetDependency,
    TargetDependencyKind,
)
from .serializer import json_string, manifest_document, manifest_to_json

__all__ = [
    "ExecutionContext",
    "add_error",
    "add_product",
    "arm_first_package",
    "current_context",
    "use_context",
    "ErrorSink",
    "ExitHandoff",
    "HandoffState",
    "deliver_on_exit",
    "Dependency",
    "Package",
    "Product",
    "SystemPackageProvider",
    "Target",
    "TargetDependency",
    "TargetDependencyKind",
    "json_string",
    "manifest_document",
    "manifest_to_json",
]
