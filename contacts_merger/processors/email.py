from typing import List

from ..core.types import EmailEntry
from ..utils.string import normalize_email
from .union import union_entries


def email_key(entry: EmailEntry) -> str:
    return normalize_email(entry.get("value"))


def merge_emails(*email_lists: List[EmailEntry]) -> List[EmailEntry]:
    """Union of email lists, case-insensitive, first list first"""
    return union_entries(email_lists, email_key)
