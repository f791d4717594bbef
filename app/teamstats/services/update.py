"""Fetch, merge and write the team dataset (one full run)."""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import requests

from ..config import api_base, list_categories, list_members
from ..errors import ConnectivityError, FetchError, NoMembersFetched
from ..models.member import Member
from ..storage.dataset import load_dataset, save_dataset
from ..utils import iso_now
from .extract import extract_member
from .fetch import FetchedDocument, fetch_member_document, probe_api
from .merge import FreshResults, count_updated_members, merge_dataset

log = logging.getLogger("teamstats.update")


@dataclass
class UpdateSummary:
    total_members: int
    successful: int
    failed: int
    updated_members: int
    preserved_members: int
    category_counts: Dict[str, int] = field(default_factory=dict)
    output_path: str = ""
    output_size: int = 0
    failures: Dict[int, str] = field(default_factory=dict)


def fetch_all(
    members: List[Member],
    base: str,
    *,
    session: Optional[requests.Session] = None,
    delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[List[FetchedDocument], Dict[int, str]]:
    """Fetch every member in order, waiting ``delay`` seconds between them.

    Returns the fetched documents and a mapping of failed member id to the
    failure reason.
    """
    documents: List[FetchedDocument] = []
    failures: Dict[int, str] = {}

    for idx, member in enumerate(members, start=1):
        if idx > 1 and delay > 0:
            log.debug("   Waiting %s seconds before next request...", delay)
            sleep(delay)

        log.info("Processing member %d/%d: %s", idx, len(members), member.name)
        try:
            doc = fetch_member_document(base, member, session=session)
        except ConnectivityError as exc:
            log.warning("Connectivity test failed for %s: %s", member.name, exc)
            failures[member.id] = "connectivity"
            continue
        except FetchError as exc:
            log.warning("Failed to fetch %s (%s): %s", member.name, exc.reason, exc)
            failures[member.id] = exc.reason
            continue
        documents.append(doc)
        log.info("   Added to processing queue")

    return documents, failures


def build_fresh_results(documents: List[FetchedDocument], categories: List[str]) -> FreshResults:
    fresh = {}
    for doc in documents:
        log.info("   Processing %s (updating with fresh data)...", doc.member.name)
        by_category = extract_member(doc.json(), doc.member, categories)
        found = sum(1 for record in by_category.values() if record is not None)
        if found:
            log.info("      Updated data for %d categories", found)
        else:
            log.warning("      No category data found for %s", doc.member.name)
        fresh[doc.member.id] = by_category
    return fresh


def run_update(
    cfg: dict,
    *,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> UpdateSummary:
    """Run the whole pipeline once and write the dataset.

    Raises NoMembersFetched when every fetch failed (nothing is written) and
    WriteFailure when the dataset cannot be saved.
    """
    members = list_members(cfg)
    categories = list_categories(cfg)
    base = api_base(cfg)
    output_path = cfg["output_path"]
    timestamp = iso_now()

    log.info("Starting data fetch at %s", timestamp)
    log.info("Starting API data fetch for %d team members...", len(members))
    log.info("API endpoint: %s", base)
    if probe_api(base, members[0].id, session=session):
        log.info("API endpoint is reachable")
    else:
        log.warning("API endpoint appears to be unreachable. Continuing anyway...")

    prior = load_dataset(output_path)

    documents, failures = fetch_all(
        members,
        base,
        session=session,
        delay=float(cfg.get("request_delay_seconds", 0)),
        sleep=sleep,
    )

    log.info("API Fetch Summary:")
    log.info("   Successful: %d/%d", len(documents), len(members))
    log.info("   Failed: %d/%d", len(failures), len(members))

    if not documents:
        raise NoMembersFetched("No data fetched successfully")

    log.info("Processing member data for all categories...")
    fresh = build_fresh_results(documents, categories)
    dataset = merge_dataset(
        prior,
        fresh,
        members=members,
        categories=categories,
        timestamp=timestamp,
    )

    updated = count_updated_members(fresh)
    prior_members = (prior or {}).get("teamMembers")
    prior_total = len(prior_members) if isinstance(prior_members, list) else 0
    summary = UpdateSummary(
        total_members=len(members),
        successful=len(documents),
        failed=len(failures),
        updated_members=updated,
        preserved_members=max(prior_total - updated, 0),
        category_counts={c: dataset["data"][c]["memberCount"] for c in categories},
        output_path=str(output_path),
        failures=failures,
    )

    log.info("Saving data to %s...", output_path)
    summary.output_size = save_dataset(output_path, dataset)
    log.info("   File saved successfully (%d bytes)", summary.output_size)

    released = len(documents)
    documents.clear()
    log.info("Released %d fetched documents", released)

    log_summary(summary, categories)
    return summary


def log_summary(summary: UpdateSummary, categories: List[str]) -> None:
    log.info("Data fetch completed successfully at %s", iso_now())
    log.info("Final Summary:")
    log.info("   API calls made: %d", summary.successful)
    log.info("   Members with fresh data: %d", summary.updated_members)
    log.info("   Members with preserved data: %d", summary.preserved_members)
    log.info("   Total members in dataset: %d", summary.total_members)
    for category, count in summary.category_counts.items():
        log.info("   %s: %d members", category, count)
    log.info("   Categories: %d (%s)", len(categories), ", ".join(categories))
    log.info("   Output file: %s", summary.output_path)
