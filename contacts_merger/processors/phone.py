from typing import List, Union
import re
from phonenumbers import parse, format_number, PhoneNumberFormat, NumberParseException

from ..core.types import PhoneEntry
from ..utils.string import normalize_phone
from .union import union_entries


def phone_key(entry: PhoneEntry) -> str:
    """Digits of the number; numbers without digits fall back to their text"""
    value = entry.get("value") or ""
    return normalize_phone(value) or value.strip().lower()


def merge_phones(*phone_lists: List[PhoneEntry]) -> List[PhoneEntry]:
    """Union of phone lists, formatting-insensitive, first list first"""
    return union_entries(phone_lists, phone_key)


class PhoneProcessor:
    """Cleans phone numbers coming from imported files"""

    def __init__(self, default_region: str = "US"):
        self.default_region = default_region
        self._number_cache = {}

    def format_phone(self, phone: str) -> str:
        """E.164 form of a number, or the cleaned input if it cannot be parsed"""
        if not phone:
            return ""

        cache_key = (phone, self.default_region)
        if cache_key in self._number_cache:
            return self._number_cache[cache_key]

        # Keep digits and the international prefix
        cleaned = re.sub(r"[^\d+]", "", str(phone))

        try:
            parsed = parse(cleaned, self.default_region)
            formatted = format_number(parsed, PhoneNumberFormat.E164)
        except NumberParseException:
            formatted = cleaned

        self._number_cache[cache_key] = formatted
        return formatted

    def format_phone_list(self, phones: Union[str, List[str]]) -> List[str]:
        """Format a list of phone numbers, dropping repeats"""
        if not phones:
            return []

        if isinstance(phones, str):
            phones = [p.strip() for p in phones.replace(";", ",").split(",")]

        formatted = []
        seen = set()

        for phone in phones:
            number = self.format_phone(phone)
            if number and number not in seen:
                seen.add(number)
                formatted.append(number)

        return formatted
