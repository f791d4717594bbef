"""Project a member's career document into per-category records."""
from typing import Any, Dict, Iterable, Optional

from ..models.member import Member
from ..models.record import MemberCategoryRecord


def _dig(data: Any, *keys):
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _or_default(value, default):
    # Mirrors the "//" alternative: null and false fall back to the default.
    if value is None or value is False:
        return default
    return value


def extract_category(doc: Any, member: Member, category: str) -> Optional[MemberCategoryRecord]:
    """Return the record for ``category`` or None when the document has none.

    Missing nested fields degrade to defaults; this never raises on a
    malformed document.
    """
    if not isinstance(doc, dict):
        return None
    subtree = doc.get(category)
    if subtree is None or subtree is False:
        return None

    return MemberCategoryRecord(
        name=member.name,
        id=member.id,
        category=category,
        current_rating=_or_default(_dig(subtree, "iRating", "value"), 0),
        chart_data=_or_default(_dig(subtree, "iRating_chart", "data"), []),
        stats=subtree,
        member_since=doc.get("member_since"),
        last_login=doc.get("last_login"),
        last_update=_or_default(doc.get("last_update"), ""),
    )


def extract_member(doc: Any, member: Member, categories: Iterable[str]) -> Dict[str, Optional[MemberCategoryRecord]]:
    return {category: extract_category(doc, member, category) for category in categories}
