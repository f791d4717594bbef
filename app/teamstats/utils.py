from datetime import datetime, timezone

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def iso_now():
    return datetime.now(timezone.utc).strftime(ISO_FORMAT)
