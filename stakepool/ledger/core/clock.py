# MIT License
# Copyright (c) 2025 Hashborn

import datetime as dt


class Clock:
    """Wall clock used for dates and timestamps. Replace in tests."""

    def now(self) -> dt.datetime:
        return dt.datetime.now(dt.timezone.utc)

    def today(self) -> dt.date:
        return self.now().date()

    def timestamp(self) -> float:
        return self.now().timestamp()
