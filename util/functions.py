from datetime import datetime, timezone
from urllib.parse import urlsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


def datetime_to_millis(value: datetime) -> int:
    """Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def millis_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def postgrest_in(values: list[str]) -> str:
    """
    - Render an `in.(...)` PostgREST filter.
    - Every value is double-quoted: author ids are DIDs and contain ':'.
    """
    quoted = ",".join('"' + v.replace("\\", "\\\\").replace('"', '\\"') + '"' for v in values)
    return f"in.({quoted})"


def normalize_page_url(url: str) -> str:
    """
    Origin + path only: query, fragment and credentials are dropped, scheme and
    host are lower-cased, default ports removed and an empty path becomes "/".
    Strings without a scheme and host are returned stripped but otherwise as is.
    """
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.hostname:
        return url.strip()
    scheme = parts.scheme.lower()
    host = parts.hostname.lower()
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    netloc = host if port is None or _DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"
    path = parts.path or "/"
    return f"{scheme}://{netloc}{path}"
