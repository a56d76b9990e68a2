"""Built-in checks, grouped by category."""

from healthchecker.plugins.core.checks.database import ConnectionCheck, QueryLatencyCheck
from healthchecker.plugins.core.checks.security import DebugModeCheck, ForceSslCheck
from healthchecker.plugins.core.checks.system import (
    DiskSpaceCheck,
    PythonVersionCheck,
    TempDirectoryCheck,
)

__all__ = [
    "ConnectionCheck",
    "DebugModeCheck",
    "DiskSpaceCheck",
    "ForceSslCheck",
    "PythonVersionCheck",
    "QueryLatencyCheck",
    "TempDirectoryCheck",
]
