"""Utility functions for loading source, template and configuration text.

This module reads inputs from local files or http(s) URLs with
proper error handling, so every CLI input accepts either form.
"""

from pathlib import Path
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class SourceLoadError(Exception):
    """Custom exception for input loading errors."""

    pass


def is_url(location: str | Path) -> bool:
    """Return True if location looks like an http(s) URL."""
    if isinstance(location, Path):
        return False
    parsed = urlparse(location)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_bytes_from_file(file_path: str | Path) -> bytes:
    """Read raw bytes from a local file.

    Args:
        file_path: Path to the file.

    Returns:
        The file contents.

    Raises:
        SourceLoadError: If the file does not exist or cannot be read.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to read file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise SourceLoadError(f"File not found: {file_path}")

    try:
        with file_path.open("rb") as f:
            data = f.read()
        logger.debug(f"Read {len(data)} bytes from {file_path}")
        return data
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise SourceLoadError(f"Error reading file {file_path}: {e}") from e


def load_bytes_from_url(url: str, timeout: int = 30) -> bytes:
    """Fetch raw bytes from a URL.

    Args:
        url: URL to fetch.
        timeout: Request timeout in seconds.

    Returns:
        The response body.

    Raises:
        SourceLoadError: If the URL is invalid or the request fails.
    """
    logger.debug(f"Attempting to fetch URL: {url}")

    if not is_url(url):
        logger.error(f"Invalid URL format: {url}")
        raise SourceLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    except requests.exceptions.Timeout:
        logger.error(f"Request timeout for URL: {url}")
        raise SourceLoadError(f"Request timeout for URL: {url}")
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise SourceLoadError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise SourceLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise SourceLoadError(f"Request error for URL {url}: {e}") from e


def load_bytes(location: str | Path, timeout: int = 30) -> bytes:
    """Read bytes from either a local path or an http(s) URL."""
    if is_url(location):
        return load_bytes_from_url(str(location), timeout)
    return load_bytes_from_file(location)


def load_text(location: str | Path, timeout: int = 30) -> str:
    """Read UTF-8 text from either a local path or an http(s) URL.

    Raises:
        SourceLoadError: If loading fails or the content is not valid UTF-8.
    """
    data = load_bytes(location, timeout)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.error(f"{location} is not valid UTF-8: {e}")
        raise SourceLoadError(f"{location} is not valid UTF-8: {e}") from e


def location_suffix(location: str | Path) -> str:
    """Lower-cased file suffix of a path or URL path, e.g. ".yaml"."""
    if is_url(location):
        return Path(urlparse(str(location)).path).suffix.lower()
    return Path(location).suffix.lower()


def parse_comma_separated(value: str | None) -> list[str]:
    """Split a comma-separated list into trimmed, non-empty items."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
