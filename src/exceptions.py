"""Exception types raised for caller precondition violations.

Problems the manifest author wants surfaced without aborting the script are
not exceptions; they go through the error sink into the document.
"""


class ManifestError(Exception):
    """Base class for defects in the evaluating build script."""


class InvalidVersionRange(ManifestError, ValueError):
    """Raised when a half-open range has its lower bound above its upper bound."""


class InvalidErrorMessage(ManifestError, ValueError):
    """Raised when a diagnostic message contains a literal quote character."""


class HandoffAlreadyArmed(ManifestError, RuntimeError):
    """Raised when the exit handoff is armed a second time."""
