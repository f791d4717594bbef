"""Fetch member career stats from the upstream stats API."""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests
from urllib3.exceptions import NameResolutionError

from ..errors import (
    REASON_CONNECT,
    REASON_DNS,
    REASON_STATUS,
    REASON_TIMEOUT,
    REASON_TRANSPORT,
    ConnectivityError,
    FetchError,
)
from ..models.member import Member
from ..version import __version__

log = logging.getLogger("teamstats.fetch")

PROBE_TIMEOUT = 5
API_PROBE_TIMEOUT = 10
CONNECT_TIMEOUT = 10
READ_TIMEOUT = 30
TOTAL_TIMEOUT = 30
CHUNK_SIZE = 1024

HEADERS = {"User-Agent": f"teamstats/{__version__}"}

_DNS_MARKERS = (
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "Failed to resolve",
)


@dataclass
class FetchedDocument:
    member: Member
    body: bytes
    status_code: int = 200

    @property
    def size(self) -> int:
        return len(self.body)

    def json(self) -> Any:
        """Decoded body, or None when the body is not valid JSON."""
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            log.warning(
                "Response for %s (ID: %s) is not valid JSON: %s",
                self.member.name,
                self.member.id,
                exc,
            )
            return None


def member_url(base: str, member_id: int) -> str:
    return f"{base.rstrip('/')}/{member_id}"


def _http(session: Optional[requests.Session]):
    return session if session is not None else requests


def _is_dns_failure(exc: requests.exceptions.ConnectionError) -> bool:
    inner = exc.args[0] if exc.args else None
    reason = getattr(inner, "reason", inner)
    if isinstance(reason, NameResolutionError):
        return True
    text = str(reason) if reason is not None else str(exc)
    return any(marker in text for marker in _DNS_MARKERS)


def classify_request_error(exc: requests.RequestException) -> str:
    # ConnectTimeout is both a Timeout and a ConnectionError; timeout wins.
    if isinstance(exc, requests.exceptions.Timeout):
        return REASON_TIMEOUT
    if isinstance(exc, requests.exceptions.ConnectionError):
        return REASON_DNS if _is_dns_failure(exc) else REASON_CONNECT
    return REASON_TRANSPORT


def probe_api(base: str, member_id: int, session: Optional[requests.Session] = None) -> bool:
    """One-off reachability check of the API before the member loop."""
    try:
        _http(session).head(
            member_url(base, member_id),
            timeout=API_PROBE_TIMEOUT,
            headers=HEADERS,
            allow_redirects=False,
        )
    except requests.RequestException as exc:
        log.debug("API probe failed: %s", exc)
        return False
    return True


def probe_member(base: str, member: Member, session: Optional[requests.Session] = None) -> None:
    """HEAD the member URL; only transport failures count, not the status."""
    url = member_url(base, member.id)
    log.info("   Testing connectivity to: %s", url)
    try:
        _http(session).head(
            url,
            timeout=PROBE_TIMEOUT,
            headers=HEADERS,
            allow_redirects=False,
        )
    except requests.RequestException as exc:
        raise ConnectivityError(member.id, str(exc)) from exc
    log.info("   Connectivity test passed")


def _read_body(resp, member: Member, url: str, *, deadline: float) -> bytes:
    """Read the streamed body, failing once the whole request passes ``deadline``."""
    chunks = []
    try:
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise FetchError(
                    member.id,
                    REASON_TIMEOUT,
                    f"timeout error fetching {url}: exceeded {TOTAL_TIMEOUT}s",
                )
            if chunk:
                chunks.append(chunk)
    except requests.RequestException as exc:
        reason = classify_request_error(exc)
        raise FetchError(member.id, reason, f"{reason} error reading {url}: {exc}") from exc
    return b"".join(chunks)


def fetch_member_document(
    base: str,
    member: Member,
    session: Optional[requests.Session] = None,
) -> FetchedDocument:
    """Probe then fetch one member's career document.

    Raises ConnectivityError when the probe fails and FetchError for any
    full-request failure, including a status other than 200.
    """
    url = member_url(base, member.id)
    log.info("Fetching data for %s (ID: %s)...", member.name, member.id)
    log.info("   URL: %s", url)

    probe_member(base, member, session=session)

    log.info("   Making API request to: %s", url)
    started = time.monotonic()
    try:
        resp = _http(session).get(
            url,
            timeout=(CONNECT_TIMEOUT, READ_TIMEOUT),
            headers=HEADERS,
            allow_redirects=False,
            stream=True,
        )
    except requests.RequestException as exc:
        reason = classify_request_error(exc)
        raise FetchError(member.id, reason, f"{reason} error fetching {url}: {exc}") from exc

    try:
        log.info("   HTTP status: %s", resp.status_code)
        if resp.status_code != 200:
            raise FetchError(
                member.id,
                REASON_STATUS,
                f"API error for {member.name} (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )
        body = _read_body(resp, member, url, deadline=started + TOTAL_TIMEOUT)
    finally:
        resp.close()

    doc = FetchedDocument(member=member, body=body, status_code=resp.status_code)
    log.info(
        "Successfully fetched data for %s (HTTP %s, %s bytes)",
        member.name,
        resp.status_code,
        doc.size,
    )
    return doc
