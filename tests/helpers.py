"""Fixed dates used across the test suite."""

import datetime

# Wednesday
TODAY = datetime.date(2024, 1, 10)
NOW = datetime.datetime(2024, 1, 10, 9, 30)


def days_ago(n):
    return TODAY - datetime.timedelta(days=n)
