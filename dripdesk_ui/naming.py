# dripdesk_ui/naming.py
"""Copy-number naming used when a record is duplicated."""

import re
from typing import Iterable, Optional

_NAME_COPY_SUFFIX = re.compile(r" \(Copy(?: (\d+))?\)$")
_EMAIL_COPY_SUFFIX = re.compile(r"\.copy(\d+)?(?=@|$)")


def strip_copy_suffix(name: str) -> str:
    """'Welcome (Copy 3)' -> 'Welcome'"""
    return _NAME_COPY_SUFFIX.sub("", name)


def next_copy_name(name: str, existing_names: Iterable[str]) -> str:
    """
    Returns the name for a new copy of `name`.
    The first copy is '<base> (Copy)', later ones '<base> (Copy N)' with N one above the highest in use.
    """
    base = strip_copy_suffix(name or "")
    highest = 0
    for existing in existing_names:
        if not existing or strip_copy_suffix(existing) != base:
            continue
        match = _NAME_COPY_SUFFIX.search(existing)
        if match:
            highest = max(highest, int(match.group(1)) if match.group(1) else 1)

    if highest == 0:
        return f"{base} (Copy)"
    return f"{base} (Copy {highest + 1})"


def next_copy_email(email: Optional[str], existing_emails: Iterable[str]) -> str:
    """
    'jane@example.com' -> 'jane.copy@example.com', then 'jane.copy2@example.com', ...
    Values without an '@' get the same suffix at the end. A blank email stays blank.
    """
    if not email:
        return ""
    base = _EMAIL_COPY_SUFFIX.sub("", email, count=1)
    local, at, domain = base.partition("@")
    copy_pattern = re.compile(rf"^{re.escape(local)}\.copy(\d+)?{re.escape(at + domain)}$", re.IGNORECASE)

    highest = 0
    for existing in existing_emails:
        match = copy_pattern.match(existing or "")
        if match:
            highest = max(highest, int(match.group(1)) if match.group(1) else 1)

    if highest == 0:
        return f"{local}.copy{at}{domain}"
    return f"{local}.copy{highest + 1}{at}{domain}"
