"""
Access Filter

Drops records the requester may not view. Public and company-wide records
are visible to everyone; any other privacy value restricts the record to the
emails in its allow-list.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..db.models import FileRecord

OPEN_PRIVACY_LEVELS = frozenset({"public", "company"})


def can_view(record: FileRecord, requester_email: Optional[str]) -> bool:
    privacy = getattr(record, "privacy", None)
    if not privacy or privacy in OPEN_PRIVACY_LEVELS:
        return True

    email = (requester_email or "").strip().lower()
    if not email:
        return False

    allowed = getattr(record, "allowed_user_emails", None) or []
    return email in {str(e).strip().lower() for e in allowed}


def filter_accessible(
    records: Iterable[FileRecord],
    requester_email: Optional[str],
) -> List[FileRecord]:
    """Return the viewable records, preserving order."""
    return [r for r in records if can_view(r, requester_email)]
