"""Exception types raised by the teamstats pipeline."""
from typing import Optional

REASON_DNS = "dns"
REASON_CONNECT = "connect"
REASON_TIMEOUT = "timeout"
REASON_STATUS = "status"
REASON_TRANSPORT = "transport"

FETCH_REASONS = (
    REASON_DNS,
    REASON_CONNECT,
    REASON_TIMEOUT,
    REASON_STATUS,
    REASON_TRANSPORT,
)


class TeamStatsError(Exception):
    pass


class ConfigError(TeamStatsError):
    pass


class ConnectivityError(TeamStatsError):
    """The lightweight probe for a member could not reach the API."""

    def __init__(self, member_id: int, message: str):
        super().__init__(f"connectivity probe failed for {member_id}: {message}")
        self.member_id = member_id


class FetchError(TeamStatsError):
    """The full request for a member did not return HTTP 200."""

    def __init__(
        self,
        member_id: int,
        reason: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.member_id = member_id
        self.reason = reason
        self.status_code = status_code


class WriteFailure(TeamStatsError):
    pass


class NoMembersFetched(TeamStatsError):
    """Every member fetch failed; nothing is written."""
