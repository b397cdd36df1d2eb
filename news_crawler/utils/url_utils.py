import base64
import hashlib
import re

import httpx

from ..exceptions import ValidationError


HTTP_SCHEMES = ("http", "https")
SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def validate_url(url: str) -> None:
    """
    Accept any absolute http(s) URL with a host, including IDN, punycode and
    IPv6 hosts.

    Raises:
        ValidationError: if the URL cannot be parsed or is not http(s)
    """
    if not url:
        raise ValidationError("Invalid URL: empty")
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ValidationError(f"Invalid URL: {url}") from e
    if parsed.scheme not in HTTP_SCHEMES or not parsed.host:
        raise ValidationError(f"Invalid URL: {url}")


def is_http_url(url: str) -> bool:
    if not url:
        return False
    return url.startswith(('http://', 'https://'))


def strip_scheme(url: str) -> str:
    return SCHEME_PATTERN.sub('', url, count=1)


def id_from_url(url: str, length: int = 16) -> str:
    """Article id as the content store derives it: unpadded base64url SHA-256 of the URL, truncated."""
    digest = hashlib.sha256(url.encode('utf-8')).digest()
    return base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')[:length]
