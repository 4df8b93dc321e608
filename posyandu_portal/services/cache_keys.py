"""Cache key naming.

Keys follow ``<role>_<resource>[_<discriminator>...]``. The cache does no
parameter-aware partitioning, so every parameter that changes a result set
has to end up in its key. Discriminator values are kept exactly as given and
percent-encoded, separators included, so two different values never share a
key.
"""

from typing import Any, Mapping
from urllib.parse import quote

# "*" is always percent-encoded in a value, so no filter never matches one
EMPTY_DISCRIMINATOR = "*"

_SEPARATORS = {"_": "%5F", "-": "%2D", ".": "%2E"}


def _word(value: str) -> str:
    return "-".join(value.strip().lower().split())


def _escape(value: Any) -> str:
    if value is None or value == "":
        return EMPTY_DISCRIMINATOR
    escaped = quote(str(value), safe="")
    for separator, code in _SEPARATORS.items():
        escaped = escaped.replace(separator, code)
    return escaped


def build_cache_key(role: str, resource: str, *discriminators: Any) -> str:
    parts = [_word(role), _word(resource)]
    parts.extend(_escape(d) for d in discriminators)
    return "_".join(parts)


def params_discriminator(params: Mapping[str, Any] | None) -> str:
    """Render query params as a stable discriminator, e.g. ``action-login.page-2``.

    Empty values are skipped; the backend client drops them from the request too.
    """
    if not params:
        return EMPTY_DISCRIMINATOR
    rendered = [
        f"{_escape(name)}-{_escape(value)}"
        for name, value in sorted(params.items())
        if value is not None and value != ""
    ]
    return ".".join(rendered) or EMPTY_DISCRIMINATOR


def params_cache_key(role: str, resource: str, params: Mapping[str, Any] | None) -> str:
    return f"{build_cache_key(role, resource)}_{params_discriminator(params)}"


# Keys and prefixes shared by more than one endpoint
KADER_DASHBOARD = build_cache_key("kader", "dashboard")
KADER_PRIORITY_CHILDREN = build_cache_key("kader", "priority", "children")
KADER_CHILDREN_PREFIX = build_cache_key("kader", "children")
ADMIN_DASHBOARD = build_cache_key("admin", "dashboard")
ADMIN_POSYANDUS_PREFIX = build_cache_key("admin", "posyandus")
ADMIN_LOGS_PREFIX = build_cache_key("admin", "logs")
CONSULTATIONS_PREFIX = "consultations_"


def kader_child_key(child_id: int) -> str:
    return build_cache_key("kader", "child", child_id)


def consultation_key(consultation_id: int) -> str:
    return f"consultation_{consultation_id}"


def consultations_key(status: str | None) -> str:
    return f"{CONSULTATIONS_PREFIX}{_escape(status)}"


def meal_logs_key(child_id: int) -> str:
    return f"meal_logs_{child_id}"


def pmt_logs_prefix(child_id: int) -> str:
    return f"pmt_logs_{child_id}_"


def pmt_stats_key(child_id: int) -> str:
    return f"pmt_stats_{child_id}"
