from typing import Optional
import re


def normalize_whitespace(text: Optional[str]) -> str:
    """Normalize all whitespace to single spaces"""
    if not text:
        return ""
    return " ".join(text.split())


def strip_punctuation(text: Optional[str]) -> str:
    """Remove everything but letters, digits and whitespace"""
    if not text:
        return ""
    # \w also matches underscore, which is punctuation here
    return re.sub(r"[^\w\s]|_", "", text)


def normalize_name(name: Optional[str]) -> str:
    """Canonical form of a name for comparison"""
    if not name:
        return ""
    return strip_punctuation(normalize_whitespace(name.lower()))


def normalize_phone(phone: Optional[str]) -> str:
    """Digits only"""
    if not phone:
        return ""
    return re.sub(r"\D", "", phone)


def normalize_email(email: Optional[str]) -> str:
    if not email:
        return ""
    return email.strip().lower()


def normalize_address(address: Optional[str]) -> str:
    """Case, punctuation and whitespace insensitive address key"""
    if not address:
        return ""
    return normalize_whitespace(strip_punctuation(address.lower()))
