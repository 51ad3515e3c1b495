from typing import List, Dict, TypedDict
from enum import Enum


class MatchKind(Enum):
    EMAIL = "email"
    PHONE = "phone"
    NAME = "name"

    @classmethod
    def parse(cls, value: str) -> "MatchKind":
        return cls(value.strip().lower())


class NameEntry(TypedDict, total=False):
    display_name: str
    given_name: str
    middle_name: str
    family_name: str


class EmailEntry(TypedDict, total=False):
    value: str
    type: str
    primary: bool


class PhoneEntry(TypedDict, total=False):
    value: str
    type: str
    primary: bool


class AddressEntry(TypedDict, total=False):
    formatted_value: str
    street: str
    locality: str
    region: str
    postal_code: str
    country: str
    type: str
    primary: bool


class OrganizationEntry(TypedDict, total=False):
    name: str
    title: str


# Field groups a directory update replaces
FIELD_GROUPS = ("names", "emails", "phones", "addresses", "organizations")

ContactDict = Dict[str, object]
ContactFields = Dict[str, List[Dict]]
