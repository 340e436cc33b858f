"""Service for reading the database password when Vault is not used."""
import getpass
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dbexport.errors import ConfigurationError

logger = logging.getLogger(__name__)


class PasswordReader:
    """Resolve a password from a password file, a literal option or an interactive prompt."""

    def __init__(self, prompt: Callable[[str], str] = getpass.getpass, interactive: Optional[bool] = None):
        self.prompt = prompt
        self.interactive = interactive
        self._s3_client = None

    @property
    def s3_client(self):
        """Lazy initialization of S3 client."""
        if self._s3_client is None:
            self._s3_client = boto3.client("s3")
        return self._s3_client

    def read_password(self, options) -> Optional[str]:
        """Return the password for ``options``, or None when none is available."""
        if options.password_file:
            logger.debug("Reading password from %s", options.password_file)
            return self._read_password_file(options.password_file)

        if options.password is not None:
            return options.password

        # Only prompt when there is a username to pair the password with
        if options.username and self._is_interactive():
            return self.prompt(f"Password for {options.username}: ") or None

        return None

    def _is_interactive(self) -> bool:
        if self.interactive is not None:
            return self.interactive
        return sys.stdin is not None and sys.stdin.isatty()

    def _read_password_file(self, location: str) -> str:
        if location.startswith("s3://"):
            content = self._read_s3_object(location)
        else:
            try:
                content = Path(location).read_text()
            except OSError as e:
                raise ConfigurationError(f"Could not read password file {location}: {e}") from e
        return content.rstrip("\r\n")

    def _read_s3_object(self, uri: str) -> str:
        bucket, _, key = uri[len("s3://"):].partition("/")
        if not bucket or not key:
            raise ConfigurationError(f"Invalid S3 password file location: {uri}")

        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read().decode("utf-8")
        except (ClientError, BotoCoreError) as e:
            raise ConfigurationError(f"Could not read password file {uri}: {e}") from e
