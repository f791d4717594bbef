"""Merge freshly extracted records into the prior dataset."""
import logging
from typing import Dict, Iterable, List, Mapping, Optional

from ..models.member import Member
from ..models.record import MemberCategoryRecord

log = logging.getLogger(__name__)

FreshResults = Mapping[int, Mapping[str, Optional[MemberCategoryRecord]]]


def prior_category_records(prior: Optional[dict], category: str) -> List[dict]:
    """Records stored for ``category`` in a prior dataset, copied.

    Anything that is not a list of objects is treated as no data.
    """
    if not isinstance(prior, dict):
        return []
    data = prior.get("data")
    bucket = data.get(category) if isinstance(data, dict) else None
    records = bucket.get("teamMembers") if isinstance(bucket, dict) else None
    if not isinstance(records, list):
        return []
    return [dict(r) for r in records if isinstance(r, dict)]


def merge_category(
    existing: List[dict],
    fresh: FreshResults,
    category: str,
) -> List[dict]:
    merged = list(existing)
    for member_id, by_category in fresh.items():
        merged = [r for r in merged if r.get("id") != member_id]
        record = by_category.get(category)
        if record is not None:
            merged.append(record.to_json())
    return merged


def merge_dataset(
    prior: Optional[dict],
    fresh: FreshResults,
    *,
    members: Iterable[Member],
    categories: Iterable[str],
    timestamp: str,
) -> dict:
    """Build the new dataset from ``prior`` and this run's fresh results.

    ``fresh`` holds one entry per successfully fetched member id, in fetch
    order. Members absent from it keep whatever prior record they had.
    """
    members = list(members)
    categories = list(categories)

    data: Dict[str, dict] = {}
    for category in categories:
        existing = prior_category_records(prior, category)
        if existing:
            log.info("   Loaded %d existing members for %s", len(existing), category)
        else:
            log.info("   No existing data for %s, starting empty", category)
        records = merge_category(existing, fresh, category)
        data[category] = {
            "teamMembers": records,
            "memberCount": len(records),
        }

    return {
        "lastUpdate": timestamp,
        "categories": categories,
        "teamMembers": [m.to_json() for m in members],
        "totalMembers": len(members),
        "data": data,
    }


def count_updated_members(fresh: FreshResults) -> int:
    """Members with at least one category present in their fresh document."""
    return sum(
        1 for by_category in fresh.values()
        if any(record is not None for record in by_category.values())
    )
