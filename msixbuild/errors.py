"""Error taxonomy for MSIX packaging.

Every failure raised by the packaging core derives from MsixBuildError, so the
command line front end can report it with a single handler. None of these
errors are retried: they describe configuration or environment problems that
a second attempt would not fix.
"""


class MsixBuildError(RuntimeError):
    """Base class for all fatal packaging errors."""


class ConfigurationError(MsixBuildError):
    """A required input is missing or malformed."""


class SigningConfigurationError(ConfigurationError):
    """Signing was requested but the credentials cannot be used safely."""


class ManifestConfigurationError(ConfigurationError):
    """Manifest metadata or template could not be resolved."""


class AppDirectoryNotFoundError(ConfigurationError):
    """The prebuilt application directory does not exist."""


class ToolNotFoundError(MsixBuildError):
    """A Windows SDK binary could not be located."""


class ToolExecutionError(MsixBuildError):
    """An external tool exited with a non-zero code or timed out."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
