import zoneinfo
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_today_date(tz: str = "UTC") -> date:
    return datetime.now().astimezone(zoneinfo.ZoneInfo(tz)).date()


def format_run_title(now: datetime, error: bool = False) -> str:
    """Run label such as 'Run – 2025-03-02 18:45', in UTC."""
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")
    title = f"Run – {stamp}"
    return f"{title} [ERROR]" if error else title
