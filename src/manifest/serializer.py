"""Conversion of the manifest object model into the document handed to the build tool.

The document is built from plain ``dict``/``list``/``str``/``int`` nodes and
rendered with the standard ``json`` module. Keys are emitted in insertion
order and optional fields are omitted when unset (never ``null``), since the
consumer distinguishes "absent" from "explicitly empty".
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from constants import Constants

if TYPE_CHECKING:  # pragma: no cover
    from .context import ExecutionContext
    from .models import Dependency, Package, Product, SystemPackageProvider, Target, TargetDependency


def provider_to_document(provider: "SystemPackageProvider") -> Dict[str, Any]:
    name, value = provider.name_value
    return {"name": name, "value": value}


def dependency_to_document(dependency: "Dependency") -> Dict[str, Any]:
    return {
        "url": dependency.url,
        "version": {
            "lowerBound": str(dependency.version_range.lower_bound),
            "upperBound": str(dependency.version_range.upper_bound),
        },
    }


def target_dependency_to_document(dependency: "TargetDependency") -> Any:
    """Serialize one target dependency.

    Only target references exist today and they serialize to the bare name.
    A new variant must add its own branch here rather than reuse that shape.
    """
    from .models import TargetDependencyKind  # pylint: disable=import-outside-toplevel

    if dependency.kind == TargetDependencyKind.TARGET:
        return dependency.name
    raise TypeError(f"Unsupported target dependency kind: {dependency.kind!r}")


def target_to_document(target: "Target") -> Dict[str, Any]:
    return {
        "name": target.name,
        "dependencies": [target_dependency_to_document(d) for d in target.dependencies],
    }


def product_to_document(product: "Product") -> Dict[str, Any]:
    return {
        "name": product.name,
        "type": product.type.value,
        "targets": list(product.targets),
    }


def package_to_document(package: "Package") -> Dict[str, Any]:
    """Build the ``package`` mapping; optional fields appear only when set."""
    doc: Dict[str, Any] = {"name": package.name}
    if package.pkg_config is not None:
        doc["pkgConfig"] = package.pkg_config
    doc["dependencies"] = [dependency_to_document(d) for d in package.dependencies]
    doc["exclude"] = list(package.exclude)
    doc["targets"] = [target_to_document(t) for t in package.targets]
    if package.providers is not None:
        doc["providers"] = [provider_to_document(p) for p in package.providers]
    if package.swift_language_versions is not None:
        doc["swiftLanguageVersions"] = [int(v) for v in package.swift_language_versions]
    return doc


def manifest_document(
    package: "Package",
    products: Iterable["Product"] = (),
    errors: Iterable[str] = (),
) -> Dict[str, Any]:
    """Build the full document: ``package``, ``products`` and ``errors``."""
    return {
        "package": package_to_document(package),
        "products": [product_to_document(p) for p in products],
        "errors": [str(e) for e in errors],
    }


def render(document: Any, indent: Optional[int] = None) -> str:
    """Render a document node as JSON text.

    Compact rendering uses fixed separators so equal documents give
    byte-identical text.
    """
    if indent is None:
        return json.dumps(document, ensure_ascii=False, separators=Constants.JSON_SEPARATORS)
    return json.dumps(document, ensure_ascii=False, indent=indent)


def manifest_to_json(
    package: "Package",
    context: Optional["ExecutionContext"] = None,
    indent: Optional[int] = None,
) -> str:
    """Serialize ``package`` with the products and errors of ``context``.

    Args:
        package: Root package.
        context: Execution context supplying products and errors; defaults to
            the active context.
        indent: Pretty-print indentation, None for the compact wire form.
    """
    if context is None:
        from .context import current_context  # pylint: disable=import-outside-toplevel
        context = current_context()
    products: List["Product"] = list(context.products)
    return render(manifest_document(package, products, context.errors), indent=indent)


def json_string(package: "Package") -> str:
    """Return only the ``package`` mapping as JSON text."""
    return render(package_to_document(package))
