import copy
from typing import List, Dict, Optional
from .types import (
    ContactDict,
    ContactFields,
    NameEntry,
    EmailEntry,
    PhoneEntry,
    AddressEntry,
    OrganizationEntry,
    FIELD_GROUPS,
)


class Contact:
    def __init__(
        self,
        resource_id: str = "",
        names: Optional[List[NameEntry]] = None,
        emails: Optional[List[EmailEntry]] = None,
        phones: Optional[List[PhoneEntry]] = None,
        addresses: Optional[List[AddressEntry]] = None,
        organizations: Optional[List[OrganizationEntry]] = None,
    ):
        self.resource_id = resource_id
        self.names = names if names is not None else []
        self.emails = emails if emails is not None else []
        self.phones = phones if phones is not None else []
        self.addresses = addresses if addresses is not None else []
        self.organizations = organizations if organizations is not None else []

    @classmethod
    def from_dict(cls, data: ContactDict) -> "Contact":
        """Create a Contact instance from a dictionary"""
        contact = cls(resource_id=data.get("resource_id", "") or "")
        for group in FIELD_GROUPS:
            entries = data.get(group) or []
            setattr(contact, group, [dict(entry) for entry in entries])
        return contact

    @classmethod
    def create(
        cls,
        resource_id: str = "",
        name: str = "",
        email: str = "",
        phone: str = "",
        address: str = "",
        organization: str = "",
    ) -> "Contact":
        """Build a contact with at most one entry per field group"""
        contact = cls(resource_id=resource_id)
        if name:
            contact.names = [{"display_name": name}]
        if email:
            contact.emails = [{"value": email, "primary": True}]
        if phone:
            contact.phones = [{"value": phone, "primary": True}]
        if address:
            contact.addresses = [{"formatted_value": address, "primary": True}]
        if organization:
            contact.organizations = [{"name": organization}]
        return contact

    def to_dict(self) -> ContactDict:
        data: ContactDict = {"resource_id": self.resource_id}
        data.update(self.fields())
        return data

    def fields(self, groups=FIELD_GROUPS) -> ContactFields:
        """Deep copy of the requested field groups"""
        return {group: copy.deepcopy(getattr(self, group)) for group in groups}

    def apply_fields(self, fields: ContactFields) -> None:
        """Replace the listed field groups; groups not listed are kept"""
        for group, entries in fields.items():
            if group not in FIELD_GROUPS:
                raise KeyError(f"Unknown field group: {group}")
            setattr(self, group, copy.deepcopy(list(entries or [])))

    def copy(self) -> "Contact":
        return Contact.from_dict(copy.deepcopy(self.to_dict()))

    @property
    def display_name(self) -> str:
        """Primary display name, built from the name parts when missing"""
        if not self.names:
            return ""
        name = self.names[0]
        if name.get("display_name"):
            return name["display_name"]
        parts = [name.get("given_name"), name.get("middle_name"), name.get("family_name")]
        return " ".join(p for p in parts if p)

    @property
    def primary_email(self) -> str:
        return self.emails[0].get("value", "") if self.emails else ""

    @property
    def primary_phone(self) -> str:
        return self.phones[0].get("value", "") if self.phones else ""

    @property
    def primary_address(self) -> str:
        return self.addresses[0].get("formatted_value", "") if self.addresses else ""

    @property
    def organization(self) -> str:
        return self.organizations[0].get("name", "") if self.organizations else ""

    def __eq__(self, other) -> bool:
        if not isinstance(other, Contact):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Contact({self.resource_id!r}, {self.display_name!r})"

    def summary(self) -> Dict[str, str]:
        """Flat view used for reports"""
        return {
            "resource_id": self.resource_id,
            "name": self.display_name,
            "email": self.primary_email,
            "phone": self.primary_phone,
            "organization": self.organization,
        }
