"""
Configuration for the AppTracker MCP Server.

Settings come from ``APPTRACKER_*`` environment variables, optionally
seeded from a ``.env`` file next to this module:

- backend location, bearer token and request timeout
- view defaults (page size, board reveal window, archived visibility)
- log level and optional log file
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

_ROOT = Path(__file__).resolve().parent
load_dotenv(dotenv_path=_ROOT / ".env")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_bool(env_var: str, default: bool) -> bool:
    """Read a yes/no flag; anything but a recognised truthy word is False."""
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "t", "y", "yes", "on")


def _parse_int(env_var: str, default: int) -> int:
    """Read an integer, keeping ``default`` for a blank or malformed value."""
    raw = (os.getenv(env_var) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = (os.getenv(env_var) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    """
    Server settings resolved once from the environment.

    Relative log paths are anchored at the project root.
    """

    def __init__(self):
        self._repo_root = _ROOT

        # Backend
        self.api_url = os.getenv("APPTRACKER_API_URL", "http://localhost:8080").rstrip("/")
        self.api_token = os.getenv("APPTRACKER_API_TOKEN") or None
        self.request_timeout = _parse_float("APPTRACKER_REQUEST_TIMEOUT", 30.0)

        # Views
        self.page_size = _parse_int("APPTRACKER_PAGE_SIZE", 12)
        self.board_window = _parse_int("APPTRACKER_BOARD_WINDOW", 5)
        self.show_archived = _parse_bool("APPTRACKER_SHOW_ARCHIVED", False)

        # Logging
        self.log_level = os.getenv("APPTRACKER_LOG_LEVEL", "INFO").upper()
        self.log_file = self._log_path(os.getenv("APPTRACKER_LOG_FILE"))

        self.server_name = os.getenv("APPTRACKER_SERVER_NAME", "apptracker-mcp-server")

    def _log_path(self, value: Optional[str]) -> Optional[Path]:
        """
        Turn ``APPTRACKER_LOG_FILE`` into a path.

        Returns:
            Absolute path of the log file, or None when logging to stderr only
        """
        if not value:
            return None
        path = Path(value)
        return path if path.is_absolute() else self._repo_root / path

    def _handlers(self) -> List[logging.Handler]:
        # stdout is the MCP stdio transport, so console output goes to stderr
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.log_file))
        return handlers

    def setup_logging(self):
        """
        Install stderr (and optional file) handlers on the root logger.

        Existing root handlers are replaced. Unknown level names fall back to INFO.
        """
        level = getattr(logging, self.log_level, logging.INFO)
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        root = logging.getLogger()
        root.setLevel(level)
        root.handlers.clear()
        for handler in self._handlers():
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root.addHandler(handler)

        if self.log_file:
            logging.info(f"Writing logs to {self.log_file}")
        logging.info(f"Log level: {self.log_level}")

    def validate(self) -> List[str]:
        """
        Check the settings for problems that do not stop the server starting.

        Returns:
            Warning messages, empty when everything looks right
        """
        warnings = []

        if not self.api_url.startswith(("http://", "https://")):
            warnings.append(f"APPTRACKER_API_URL is not an http(s) URL: {self.api_url}")

        if not self.api_token:
            warnings.append(
                "APPTRACKER_API_TOKEN is not set. "
                "The server will start but backend calls will be rejected as unauthorized."
            )

        for name, value in (
            ("APPTRACKER_PAGE_SIZE", self.page_size),
            ("APPTRACKER_BOARD_WINDOW", self.board_window),
        ):
            if value < 1:
                warnings.append(f"{name} must be positive, got {value}")

        if self.log_file:
            directory = self.log_file.parent
            if not directory.exists():
                try:
                    directory.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    warnings.append(f"Cannot create log directory {directory}: {e}")
            elif not os.access(directory, os.W_OK):
                warnings.append(f"Log directory not writable: {directory}")

        return warnings


# Process-wide settings
config = Config()


def get_config() -> Config:
    """Return the process-wide Config instance."""
    return config
