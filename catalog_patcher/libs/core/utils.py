"""
Core Utilities

Logging setup, console banners and small helpers shared across the patcher.
"""

import logging
import re
import sys
from typing import Type

import urllib3

from .exceptions import NetworkError, PatcherError

logger = logging.getLogger(__name__)

RULE_CHARS = {
    "light": "─",
    "heavy": "━",
}


def setup_logging(debug: bool = False) -> None:
    """
    Set up logging configuration for the application.

    Args:
        debug: Enable debug logging level
    """
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if debug:
        logger.debug("Debug mode enabled")
        # keep urllib3 at INFO
        logging.getLogger("urllib3").setLevel(logging.INFO)


def disable_ssl_warnings() -> None:
    """Disable SSL warnings when --skip-tls is used"""
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


def line(width: int = 60, style: str = "light") -> str:
    """
    Print a horizontal rule to stderr and return it.

    Args:
        width: Number of characters
        style: 'light' or 'heavy'
    """
    rule = RULE_CHARS.get(style, RULE_CHARS["light"]) * width
    print(rule, file=sys.stderr)
    return rule


def header(title: str) -> None:
    """Announce the start of a stage"""
    print(file=sys.stderr)
    line(60, "light")
    logger.info(f"  {title}")
    line(60, "light")


def ok(message: str) -> None:
    """Log a success line"""
    logger.info(f"✓ {message}")


def fail(message: str) -> None:
    """Log a failure line"""
    logger.error(f"✗ {message}")


def mask_sensitive_info(text: str, secret: str = None) -> str:
    """
    Mask sensitive information in text for logging and debug output.

    Args:
        text: Text to mask
        secret: Literal secret (password, token) to mask, optional

    Returns:
        Text with sensitive information masked
    """
    if not text:
        return text

    masked_text = text
    if secret and secret in masked_text:
        masked_text = masked_text.replace(secret, "***MASKED***")

    # Docker config "auth" values are base64 user:password pairs
    masked_text = re.sub(r'("auth"\s*:\s*")[A-Za-z0-9+/=]+(")', r'\1***MASKED***\2', masked_text)

    masked_text = re.sub(r'Negotiate [A-Za-z0-9+/=]+', 'Negotiate ***MASKED***', masked_text)
    masked_text = re.sub(r'Bearer [A-Za-z0-9+/=_-]+', 'Bearer ***MASKED***', masked_text)
    masked_text = re.sub(r'sha256~[A-Za-z0-9_-]+', 'sha256~***MASKED***', masked_text)

    return masked_text


def handle_network_error(error: Exception, context: str = "",
                         exception_class: Type[PatcherError] = NetworkError) -> None:
    """
    Centralized network error handling with context-specific messages

    Args:
        error: The caught exception
        context: Context information for better error messages
        exception_class: The specific exception class to raise

    Raises:
        PatcherError: Appropriate error type with user-friendly message
    """
    error_str = str(error).lower()

    if "certificate verify failed" in error_str:
        raise exception_class(
            f"{context}: SSL certificate verification failed. "
            "Install the Red Hat IT root CA or rerun with --skip-tls."
        ) from error
    if "name or service not known" in error_str or "failed to resolve" in error_str:
        raise exception_class(
            f"{context}: host could not be resolved. Make sure to be connected on VPN."
        ) from error
    if "timed out" in error_str or "timeout" in error_str:
        raise exception_class(f"{context}: request timed out. Retry or raise HTTP_TIMEOUT.") from error

    raise exception_class(f"{context}: {error}") from error
