# SigningCredentialResolver.py
"""
Signing credential resolution.

Decides whether the package gets signed and with which PFX file. Sources, in
order of precedence:

1. Explicit PFX file from the build configuration (must exist)
2. Base64-encoded PFX from MSIX_SIGN_PFX_BASE64 (written to a temporary file)
3. Nothing configured: the package stays unsigned

The password comes from the build configuration or MSIX_SIGN_PFX_PASSWORD.
"""
import base64
import binascii
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from msixbuild.errors import SigningConfigurationError
from msixbuild.types import SigningCredential

logger = logging.getLogger(__name__)

ENV_SIGN_PFX_BASE64 = "MSIX_SIGN_PFX_BASE64"
ENV_SIGN_PASSWORD = "MSIX_SIGN_PFX_PASSWORD"

TEMP_PFX_NAME = "msix-signing.pfx"


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class SigningCredentialResolver:
    """
    Resolves signing credentials for one packaging run.

    A credential returned with is_temporary=True owns a file inside temp_dir;
    the caller must call discard() on it once signtool.exe has finished.
    """

    def __init__(
        self,
        temp_dir: Path,
        pfx_file: Optional[Path] = None,
        password: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._temp_dir = temp_dir
        self._pfx_file = pfx_file
        self._password = _non_blank(password)
        self._environ = os.environ if environ is None else environ

    def resolve(self) -> Optional[SigningCredential]:
        """
        Resolves the credential to sign with.

        Returns:
            SigningCredential, or None when signing is not configured

        Raises:
            SigningConfigurationError: If signing was requested but cannot proceed
        """
        env_pfx_base64 = _non_blank(self._environ.get(ENV_SIGN_PFX_BASE64))

        if self._pfx_file is not None:
            if self._pfx_file.is_file():
                password = self._resolve_password(
                    f"MSIX signing is enabled but the signing password is missing. "
                    f"Provide signing.password in the build configuration or set {ENV_SIGN_PASSWORD}."
                )
                return SigningCredential(pfx_path=self._pfx_file, password=password)

            if env_pfx_base64 is None:
                raise SigningConfigurationError(f"Signing PFX file not found at {self._pfx_file}")

            logger.info(
                f"Configured signing PFX file not found at {self._pfx_file}. "
                f"Falling back to {ENV_SIGN_PFX_BASE64}."
            )

        if env_pfx_base64 is None:
            return None

        password = self._resolve_password(
            f"MSIX signing is enabled via {ENV_SIGN_PFX_BASE64} but the password is missing. "
            f"Set signing.password in the build configuration or {ENV_SIGN_PASSWORD}."
        )

        pfx_path = self._write_temp_pfx(env_pfx_base64)
        logger.info(f"Signing PFX loaded from {ENV_SIGN_PFX_BASE64} into {pfx_path}")

        return SigningCredential(pfx_path=pfx_path, password=password, is_temporary=True)

    def _resolve_password(self, missing_message: str) -> str:
        password = self._password or _non_blank(self._environ.get(ENV_SIGN_PASSWORD))
        if password is None:
            raise SigningConfigurationError(missing_message)
        return password

    def _write_temp_pfx(self, base64_value: str) -> Path:
        """
        Decodes the PFX payload and writes it into the run's temp directory.

        Raises:
            SigningConfigurationError: If the payload is not valid base64
        """
        try:
            decoded = base64.b64decode(base64_value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SigningConfigurationError(f"{ENV_SIGN_PFX_BASE64} does not contain valid base64 data.") from e

        self._temp_dir.mkdir(parents=True, exist_ok=True)

        pfx_path = self._temp_dir / TEMP_PFX_NAME
        pfx_path.unlink(missing_ok=True)

        # Owner-only, the file holds a private key
        fd = os.open(pfx_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(decoded)

        return pfx_path
