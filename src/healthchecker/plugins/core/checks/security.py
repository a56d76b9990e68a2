"""Security configuration checks."""

from healthchecker.config import SiteConfig
from healthchecker.core.check import BaseCheck
from healthchecker.models.health import CheckResult


class DebugModeCheck(BaseCheck):
    slug = "security.debug_mode"
    category = "security"
    title = "Debug mode"

    def __init__(self, site: SiteConfig):
        super().__init__()
        self.site = site

    def perform_check(self) -> CheckResult:
        if self.site.debug:
            return self.warning(
                "Debug mode is enabled. This should be disabled in production "
                "for security and performance."
            )
        return self.good("Debug mode is disabled.")


class ForceSslCheck(BaseCheck):
    """Force SSL setting versus the scheme the site is served on."""

    slug = "security.force_ssl"
    category = "security"
    title = "Force SSL"

    def __init__(self, site: SiteConfig):
        super().__init__()
        self.site = site

    def perform_check(self) -> CheckResult:
        force_ssl = self.site.force_ssl
        is_https = self.site.live_site.lower().startswith("https://")

        if force_ssl == "none" and not is_https:
            return self.critical(
                "Force SSL is disabled and the site is not using HTTPS. Enable SSL for security."
            )

        if force_ssl == "none":
            return self.warning(
                "Site is using HTTPS but Force SSL is disabled. "
                "Enable Force SSL to ensure all connections use HTTPS."
            )

        if force_ssl == "administrator":
            return self.warning(
                "Force SSL is set to Administrator only. Consider enabling it for the entire site."
            )

        return self.good("Force SSL is enabled for the entire site.")
