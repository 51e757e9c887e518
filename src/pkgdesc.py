"""pkgdesc - evaluate a package manifest script and emit its description.

    Returns:
        int: Exit code
"""
import logging
import os
import runpy
import sys
from typing import List, Optional, Sequence, Tuple

from args import find_config_path, parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled, Timer
from config import apply_cli_overrides, apply_config, load_config
from constants import Constants, ExitCodes
from manifest.context import ExecutionContext, arm_first_package, use_context
from manifest.models import Package
from manifest.serializer import manifest_to_json

logger = logging.getLogger(__name__)


def evaluate_manifest(path: str, fileno: Optional[int] = None) -> Tuple[ExecutionContext, Optional[Package]]:
    """Run the manifest script at ``path`` in a fresh execution context.

    Args:
        path (str): Manifest script path.
        fileno (int, optional): Descriptor to deliver the document to at exit.
            When given, the first package constructed arms the exit handoff.

    Returns:
        tuple: (context, first package constructed or None)
    """
    built: List[Package] = []
    arm = arm_first_package(fileno) if fileno is not None else None

    def on_package(ctx: ExecutionContext, package: Package) -> None:
        if not built:
            built.append(package)
        if arm is not None:
            arm(ctx, package)

    ctx = ExecutionContext(on_package=on_package)
    with Timer() as t:
        with use_context(ctx):
            try:
                runpy.run_path(path, run_name="__main__")
            except Exception:
                # A faulted manifest must not deliver what it built so far.
                ctx.handoff.abandon("manifest_raised")
                raise
    if is_debug_enabled(logger):
        logger.debug(
            "Manifest evaluated",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="evaluate_manifest",
                outcome="package" if built else "no_package",
                target=path,
                duration_ms=t.duration_ms(),
            ),
        )
    return ctx, (built[0] if built else None)


def export_document(text: str, path: Optional[str]) -> None:
    """Write the document to ``path`` or stdout.

    Args:
        text (str): Serialized document.
        path (str, optional): Output file; stdout when None.
    """
    if not path:
        sys.stdout.write(text + "\n")
        return
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        logging.info("Manifest document has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("Error writing manifest document: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def main(argv: Optional[Sequence[str]] = None):
    """Main function of the program."""
    # Config comes first: it can rename the descriptor flag the parser accepts.
    apply_config(load_config(find_config_path(argv)))
    args = parse_args(argv)
    apply_cli_overrides(args)
    configure_logging(Constants.LOG_LEVEL, Constants.LOG_FILE)

    manifest_path = args.manifest
    if not os.path.isfile(manifest_path):
        logging.error("Manifest not found: %s", manifest_path)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        ctx, package = evaluate_manifest(manifest_path, args.FILENO)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Manifest %s raised: %s", manifest_path, e)
        sys.exit(ExitCodes.MANIFEST_ERROR.value)

    if package is None:
        logging.error("Manifest %s did not declare a Package.", manifest_path)
        sys.exit(ExitCodes.NO_PACKAGE.value)

    if len(ctx.errors):
        logging.warning("Manifest reported %d error(s).", len(ctx.errors))

    if args.FILENO is not None:
        # The armed handoff writes the document while the interpreter exits.
        logging.info("Package %s will be delivered to fd %s at exit.", package.name, args.FILENO)
        sys.exit(ExitCodes.SUCCESS.value)

    export_document(manifest_to_json(package, ctx, indent=Constants.DEFAULT_INDENT), args.OUTPUT)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
