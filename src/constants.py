"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    MANIFEST_ERROR = 2
    NO_PACKAGE = 3


class ProviderLabels(Enum):
    """Labels emitted for system package providers.

    Args:
        Enum (string): Variant tag written to the manifest document.
    """

    BREW = "Brew"
    APT = "Apt"


class ProductTypes(Enum):
    """Kinds of products a package can vend.

    Args:
        Enum (string): Product type written to the manifest document.
    """

    LIBRARY = "library"
    EXECUTABLE = "executable"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Largest value of the signed 64-bit integers used by the consuming build tool
    VERSION_COMPONENT_MAX = 2**63 - 1

    FILENO_FLAG = "-fileno"
    MANIFEST_FILE = "Package.py"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "PKGDESC_LOG_LEVEL"
    CONFIG_ENV = "PKGDESC_CONFIG"
    CONFIG_SECTION = "pkgdesc"
    DEFAULT_LOG_LEVEL = "INFO"
    LOG_LEVEL = None
    LOG_FILE = None
    # Indentation for human-readable output only; handoff documents are compact
    DEFAULT_INDENT = None
    JSON_SEPARATORS = (",", ":")
