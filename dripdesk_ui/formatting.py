# dripdesk_ui/formatting.py
"""Display helpers used by column render functions."""

from .grid import parse_date

CAMPAIGN_STATUSES = {
    "draft": "Draft",
    "active": "Active",
    "paused": "Paused",
    "completed": "Completed",
    "archived": "Archived",
}

DAYS_OF_WEEK = {
    "0": "Sun",
    "1": "Mon",
    "2": "Tue",
    "3": "Wed",
    "4": "Thu",
    "5": "Fri",
    "6": "Sat",
}


def format_date(value) -> str:
    """'2024-03-01T09:30:00Z' -> '2024-Mar-01, 09:30'"""
    if not value:
        return "N/A"
    parsed = parse_date(str(value))
    if parsed is None:
        return "Invalid date"
    return parsed.strftime("%Y-%b-%d, %H:%M")


def format_day(value) -> str:
    if not value:
        return ""
    parsed = parse_date(str(value))
    return parsed.strftime("%Y-%m-%d") if parsed else ""


def status_label(value) -> str:
    if not value:
        return ""
    return CAMPAIGN_STATUSES.get(value, value)


def days_label(values) -> str:
    if not values:
        return ""
    ordered = sorted((str(v) for v in values), key=lambda v: (v not in DAYS_OF_WEEK, v))
    return ", ".join(DAYS_OF_WEEK.get(v, v) for v in ordered)


def detail_link(collection: str, record: dict, text: str) -> str:
    """Markdown link to a record's detail view, rendered inside the grid."""
    label = (text or "").replace("[", "\\[").replace("]", "\\]")
    return f"[{label}](#{collection}/{record.get('id')})"
