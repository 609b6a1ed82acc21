from datetime import datetime, timezone, timedelta

KST = timezone(timedelta(hours=9))


def now_kst():
    """Current time in KST (UTC+9)."""
    return datetime.now(KST)
