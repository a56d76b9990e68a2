"""System and hosting checks."""

import os
import platform
import shutil
import sys

from healthchecker.config import SiteConfig
from healthchecker.core.check import BaseCheck
from healthchecker.models.health import CheckResult

_MB = 1024 * 1024


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version string such as ``"3.12"`` into a tuple of ints."""
    return tuple(int(part) for part in version.split("."))


def format_bytes(size: float) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    index = 0
    while size >= 1024 and index < len(units) - 1:
        size /= 1024
        index += 1
    return f"{round(size, 2):g} {units[index]}"


class PythonVersionCheck(BaseCheck):
    slug = "system.python_version"
    category = "system"
    title = "Python version"

    def __init__(self, site: SiteConfig, version_info: tuple[int, ...] | None = None):
        super().__init__()
        self.site = site
        self.version_info = version_info or tuple(sys.version_info[:3])

    def perform_check(self) -> CheckResult:
        current = ".".join(str(part) for part in self.version_info)
        minimum = self.site.min_python_version
        recommended = self.site.recommended_python_version

        if self.version_info < parse_version(minimum):
            return self.critical(
                f"Python {current} is below the minimum required version {minimum}."
            )

        if self.version_info < parse_version(recommended):
            return self.warning(
                f"Python {current} is supported but {recommended} or later is recommended."
            )

        return self.good(f"Python {current} ({platform.python_implementation()}) meets all requirements.")


class DiskSpaceCheck(BaseCheck):
    """Free space on the volume holding the site root."""

    slug = "system.disk_space"
    category = "system"
    title = "Disk space"

    def __init__(self, site: SiteConfig):
        super().__init__()
        self.site = site

    def perform_check(self) -> CheckResult:
        free = shutil.disk_usage(self.site.root_path).free
        free_formatted = format_bytes(free)

        if free < self.site.critical_free_disk_mb * _MB:
            return self.critical(f"Disk space critically low: {free_formatted} free.")

        if free < self.site.warning_free_disk_mb * _MB:
            return self.warning(f"Disk space is running low: {free_formatted} free.")

        return self.good(f"Disk space available: {free_formatted} free.")


class TempDirectoryCheck(BaseCheck):
    slug = "system.temp_directory"
    category = "system"
    title = "Temp directory"

    def __init__(self, site: SiteConfig):
        super().__init__()
        self.site = site

    def perform_check(self) -> CheckResult:
        path = self.site.tmp_path

        if not path.is_dir():
            return self.critical(f"Temp directory does not exist: {path}")

        if not os.access(path, os.W_OK):
            return self.critical(f"Temp directory is not writable: {path}")

        return self.good("Temp directory exists and is writable.")
