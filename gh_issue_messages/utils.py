"""
Utility functions and helpers.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional, Tuple


logger = logging.getLogger(__name__)

APP_NAME_PLACEHOLDER = "{appName}"
APP_URL_PLACEHOLDER = "{appUrl}"


def substitute_placeholders(template: str, app_name: str, app_url: str) -> str:
    """
    Replace the ``{appName}`` and ``{appUrl}`` placeholders in a template.

    Only the first occurrence of each placeholder is replaced; later
    repeats are kept literally. Missing placeholders are not an error.

    Args:
        template: Text containing optional placeholders
        app_name: Display name of the posting identity
        app_url: Canonical URL of the posting identity

    Returns:
        Template with placeholders substituted

    Example:
        >>> substitute_placeholders("Hello {appName}", "Bot", "https://x/y")
        'Hello Bot'
    """
    return template.replace(APP_NAME_PLACEHOLDER, app_name, 1).replace(
        APP_URL_PLACEHOLDER, app_url, 1
    )


def validate_repository_format(repository: str) -> bool:
    """
    Validate repository format (owner/repo).

    Args:
        repository: Repository string

    Returns:
        True if valid format
    """
    parts = repository.split('/')
    return len(parts) == 2 and all(part.strip() for part in parts)


def parse_repository(repository: str) -> Tuple[str, str]:
    """
    Split an ``owner/repo`` string.

    Args:
        repository: Repository string

    Returns:
        (owner, repo) tuple

    Raises:
        ValueError: If the string is not in owner/repo format
    """
    if not validate_repository_format(repository):
        raise ValueError(f"Repository must be in 'owner/repo' format, got '{repository}'")

    owner, repo = repository.split('/')
    return owner.strip(), repo.strip()


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    enable_color: bool = True,
) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (optional)
        enable_color: Enable colored console output
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper()))

    # Clear existing handlers
    root.handlers.clear()

    if enable_color:
        # Rich renders level and time itself
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(show_path=False)
        console_format = "%(message)s"
    else:
        console_handler = logging.StreamHandler()
        console_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(logging.Formatter(console_format))
    root.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG for file
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        root.addHandler(file_handler)


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Empty ``default_repository`` and ``github_token`` values fall back to
    the ``GITHUB_REPOSITORY`` and ``GITHUB_TOKEN`` environment variables.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary with defaults
    """
    config: Dict[str, Any] = {
        "log_directory": "logs/",
        "log_level": "INFO",
        "enable_color": True,
        "retry_attempts": 3,
        "github_api_timeout_seconds": 30,
        "default_repository": "",
        "update_after_days": 7,
        "github_token": "",
        "app_id": None,
        "private_key_path": None,
        "installation_id": None,
    }

    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                config.update(json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable config file {config_path}: {e}")

    if not config["default_repository"]:
        config["default_repository"] = os.environ.get("GITHUB_REPOSITORY", "")

    if not config["github_token"]:
        config["github_token"] = os.environ.get("GITHUB_TOKEN", "")

    return config
