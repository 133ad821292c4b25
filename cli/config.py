"""Configuration management for the PDF Auditor CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


class Config:
    """
    CLI settings and the saved API key, kept in a JSON file.

    Keys missing from the file fall back to DEFAULT_CONFIG. A file that
    cannot be parsed is copied aside to config.json.bak and the defaults
    are used instead.
    """

    DEFAULT_CONFIG = {
        "auditor_host": os.environ.get("PDF_AUDITOR_HOST", "localhost"),
        "auditor_port": int(os.environ.get("PDF_AUDITOR_PORT", "8000")),
        "timeout": None,
        "downloads_dir": "downloads",
    }

    def __init__(self, config_path: Path):
        """
        Args:
            config_path: Path to config JSON file (typically ~/.pdf-auditor/config.json)
        """
        self.config_path = self._prepare_path(config_path)
        self.data = self._load()

    @staticmethod
    def _prepare_path(config_path: Path) -> Path:
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            return config_path
        except PermissionError:
            fallback = Path(tempfile.gettempdir()) / '.pdf-auditor' / config_path.name
            logger.warning(f"Cannot create {config_path.parent}, using {fallback}")
            fallback.parent.mkdir(parents=True, exist_ok=True)
            return fallback

    def _load(self) -> dict:
        config = dict(self.DEFAULT_CONFIG)

        if not self.config_path.exists():
            self._write(config)
            return config

        try:
            stored = json.loads(self.config_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Unreadable config file {self.config_path}: {e}")
            self._back_up()
            return config

        if isinstance(stored, dict):
            config.update(stored)
        else:
            logger.warning(f"Ignoring config file {self.config_path}: not a JSON object")
        return config

    def _back_up(self) -> None:
        backup_path = self.config_path.with_suffix('.json.bak')
        try:
            shutil.copy(self.config_path, backup_path)
        except OSError as e:
            logger.warning(f"Could not back up config file: {e}")

    def _write(self, data: dict) -> None:
        try:
            self.config_path.write_text(json.dumps(data, indent=2))
        except OSError as e:
            logger.warning(f"Could not write config file {self.config_path}: {e}")

    def save(self) -> None:
        """Save current configuration to file."""
        self._write(self.data)

    def get_api_key(self) -> Optional[str]:
        return self.data.get('api_key')

    def set_api_key(self, key: str) -> None:
        """
        Remember the API key issued at register/login.

        Args:
            key: API key string (format: "pda_<uuid>")
        """
        self.data['api_key'] = key
        self.save()

    def get_base_url(self) -> str:
        """
        Auditor base URL, e.g. "http://localhost:8000".
        """
        host = self.data.get('auditor_host') or 'localhost'
        port = self.data.get('auditor_port') or 8000
        return f"http://{host}:{port}"

    def get_timeout(self) -> Optional[float]:
        """
        Request timeout in seconds.

        Returns:
            The configured timeout, or None (wait indefinitely) when it is
            unset or not a positive number
        """
        timeout = self.data.get('timeout')
        if timeout is None or isinstance(timeout, bool):
            return None
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid timeout setting: {timeout!r}")
            return None
        return timeout if timeout > 0 else None

    def get_downloads_dir(self) -> Path:
        """Directory CSV exports are saved to when none is given."""
        return Path(self.data.get('downloads_dir') or 'downloads')
