"""
Timestamp utilities (stdlib-only).

Two clocks meet in a command run:

- **Run timestamp:** local wall-clock time at second precision, used in the
  run file prefix so operators can sort runs by eye (``20261018.044100``).
- **Entry timestamp:** UTC with millisecond precision and a ``Z`` suffix,
  stamped on every log record.

STDLIB ONLY - NO PYDANTIC.
"""

from datetime import UTC, datetime

RUN_TIMESTAMP_FORMAT = "%Y%m%d.%H%M%S"


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def format_run_timestamp(moment: datetime) -> str:
    """Format ``moment`` as compact second-precision local time.

    Aware datetimes are converted to the local timezone first; naive ones
    are taken to be local already.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime(RUN_TIMESTAMP_FORMAT)


def to_iso8601_z(moment: datetime) -> str:
    """Convert datetime to ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
