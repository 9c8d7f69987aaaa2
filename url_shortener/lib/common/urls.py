"""Building the public short URL behind proxies."""

from typing import Dict, Mapping, Optional


def extract_forwarded_headers(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers, case-insensitively.

    Args:
        headers: Request headers

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for, forwarded_prefix
    """
    lowered = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": lowered.get("x-forwarded-proto"),
        "forwarded_host": lowered.get("x-forwarded-host"),
        "forwarded_for": lowered.get("x-forwarded-for"),
        "forwarded_prefix": lowered.get("x-forwarded-prefix"),
    }


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build the scheme://host part of short URLs.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Configured base URL
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def resolve_path_prefix(headers: Mapping[str, str], configured_prefix: str = "") -> str:
    """Path prefix from X-Forwarded-Prefix, else the configured one.

    Returns the prefix normalized with a leading slash and no trailing slash,
    or '' when there is none.
    """
    prefix = extract_forwarded_headers(headers)["forwarded_prefix"] or configured_prefix or ""
    prefix = prefix.strip().strip("/")
    return "/" + prefix if prefix else ""


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional prefix and short code.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    prefix = path_prefix.strip("/")
    if prefix:
        return f"{base_url.rstrip('/')}/{prefix}/{short_code}"
    return f"{base_url.rstrip('/')}/{short_code}"
