"""Client-side checks for new facts."""

from urllib.parse import urlparse

from .categories import get_category

MAX_TEXT_LENGTH = 200
ALLOWED_SCHEMES = {"http", "https"}
INVALID_HOST_CHARS = set(" \t\n\r<>\"{}|\\^`")


def is_valid_http_url(value: str) -> bool:
    """Check that a string parses as an absolute http(s) URL."""
    try:
        parsed = urlparse(value.strip())
        # Raises ValueError when the port is not a number in 0-65535.
        parsed.port
    except ValueError:
        return False

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    hostname = parsed.hostname
    if not parsed.netloc or not hostname:
        return False

    return not INVALID_HOST_CHARS.intersection(hostname)


def validate_fact_input(text: str, source: str, category: str) -> list[str]:
    """Validate the three form fields.

    Returns:
        Human-readable problems, empty when the input can be submitted.
    """
    errors: list[str] = []

    if not text.strip():
        errors.append("Write the fact you want to share.")
    elif len(text) > MAX_TEXT_LENGTH:
        errors.append(
            f"Facts are limited to {MAX_TEXT_LENGTH} characters "
            f"({len(text) - MAX_TEXT_LENGTH} too many)."
        )

    if not is_valid_http_url(source):
        errors.append("The source must be a http:// or https:// link.")

    if not category:
        errors.append("Choose a category.")
    elif get_category(category) is None:
        errors.append(f"Unknown category: {category}")

    return errors
