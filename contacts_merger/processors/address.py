from typing import Dict, List
import re

from ..core.types import AddressEntry
from ..utils.string import normalize_address
from .union import union_entries


def format_address(entry: AddressEntry) -> str:
    """Single-line form of an address entry"""
    if entry.get("formatted_value"):
        return clean_address_string(entry["formatted_value"])
    parts = [
        entry.get("street", ""),
        entry.get("locality", ""),
        " ".join(filter(None, [entry.get("region", ""), entry.get("postal_code", "")])),
        entry.get("country", ""),
    ]
    return ", ".join(p.strip() for p in parts if p and p.strip())


def clean_address_string(address: str) -> str:
    """Clean up an address string"""
    if not address:
        return ""
    address = re.sub(r"\s*\n\s*", ", ", address)
    address = re.sub(r"[ \t]+", " ", address).strip()
    address = re.sub(r",\s*,", ",", address)
    address = re.sub(r",\s*$", "", address)
    return address


def address_key(entry: AddressEntry) -> str:
    return normalize_address(format_address(entry))


def merge_addresses(*address_lists: List[AddressEntry]) -> List[AddressEntry]:
    """Union of address lists, punctuation and case insensitive, first list first"""
    return union_entries(address_lists, address_key)


def string_to_address_dict(address_str: str) -> Dict:
    """Convert a string address into an address entry"""
    return {"formatted_value": clean_address_string(address_str)}
