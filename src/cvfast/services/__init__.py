"""Services"""

from cvfast.services.access_log import list_access_logs, record_access, record_access_safely
from cvfast.services.resolution import Resolution, resolve_hash
from cvfast.services.short_links import (
    create_short_link,
    get_active_by_hash,
    list_by_curriculum,
    revoke_short_link,
)

__all__ = [
    "Resolution",
    "create_short_link",
    "get_active_by_hash",
    "list_access_logs",
    "list_by_curriculum",
    "record_access",
    "record_access_safely",
    "resolve_hash",
    "revoke_short_link",
]
