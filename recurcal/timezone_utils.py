"""Clock access for recurcal with a test override."""

from __future__ import annotations

import datetime
import logging
import os

logger = logging.getLogger(__name__)

TEST_TIME_ENV = "RECURCAL_TEST_TIME"


class TimeProvider:
    """Provides current time with test time override support."""

    def now_utc(self) -> datetime.datetime:
        """Return current UTC time with tzinfo.

        Can be overridden for testing via the RECURCAL_TEST_TIME environment
        variable. Format: ISO 8601 datetime string (e.g. "2026-01-15T09:00:00Z").
        A naive override is taken to be UTC.

        Returns:
            Current time in UTC with timezone info
        """
        test_time = os.environ.get(TEST_TIME_ENV)
        if test_time:
            try:
                from dateutil import parser as date_parser

                dt = date_parser.isoparse(test_time)
                if dt.tzinfo is not None:
                    return dt.astimezone(datetime.timezone.utc)
                return dt.replace(tzinfo=datetime.timezone.utc)

            except (ValueError, OverflowError) as e:
                logger.warning("Failed to parse %s=%r: %s", TEST_TIME_ENV, test_time, e)
                # Fall through to real time

        return datetime.datetime.now(datetime.timezone.utc)


_time_provider = TimeProvider()


def now_utc() -> datetime.datetime:
    """Get current UTC time (convenience function).

    Returns:
        Current time in UTC
    """
    return _time_provider.now_utc()
