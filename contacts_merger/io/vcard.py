import logging
import os
import re
import tempfile
import uuid
from pathlib import Path
from typing import List, Dict, Optional, Union

import vobject

from .. import settings
from ..core.contact import Contact
from ..core.errors import DirectoryError, NotFoundError
from ..core.types import ContactFields
from .directory import ContactDirectory

logger = logging.getLogger(__name__)

_RESOURCE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")


class VCardHandler:
    """Converts between Contact objects and vCard components"""

    def read_vcard(self, text: str) -> List[Contact]:
        """Read every contact in a vCard document"""
        return [self.vcard_to_contact(vcard) for vcard in vobject.readComponents(text)]

    def write_vcard(self, contacts: List[Contact]) -> str:
        """Serialize contacts into a vCard document"""
        return "".join(self.contact_to_vcard(contact).serialize() for contact in contacts)

    def vcard_to_contact(self, vcard, resource_id: str = "") -> Contact:
        """Convert vCard to contact"""
        contact = Contact(resource_id=resource_id or self._get_vcard_value(vcard, "uid"))

        name: Dict[str, str] = {}
        display_name = self._get_vcard_value(vcard, "fn")
        if display_name:
            name["display_name"] = display_name
        if "n" in vcard.contents:
            structured = vcard.n.value
            for key, part in [
                ("given_name", structured.given),
                ("middle_name", structured.additional),
                ("family_name", structured.family),
            ]:
                part = self._join(part)
                if part:
                    name[key] = part
        if name:
            contact.names = [name]

        contact.emails = [
            self._typed_entry("value", line.value, line)
            for line in vcard.contents.get("email", [])
            if line.value
        ]
        contact.phones = [
            self._typed_entry("value", line.value, line)
            for line in vcard.contents.get("tel", [])
            if line.value
        ]
        contact.addresses = [
            address
            for address in (self._parse_vcard_address(line) for line in vcard.contents.get("adr", []))
            if address
        ]

        organization = self._join(self._get_vcard_value(vcard, "org"))
        if organization:
            entry = {"name": organization}
            title = self._get_vcard_value(vcard, "title")
            if title:
                entry["title"] = title
            contact.organizations = [entry]

        for entries in (contact.emails, contact.phones, contact.addresses):
            for idx, entry in enumerate(entries):
                entry["primary"] = idx == 0

        return contact

    def contact_to_vcard(self, contact: Contact):
        """Convert contact to vCard object"""
        vcard = vobject.vCard()

        if contact.resource_id:
            self._add_vcard_field(vcard, "uid", contact.resource_id)

        # FN and N are mandatory in vCard 3.0
        vcard.add("fn").value = contact.display_name
        name = contact.names[0] if contact.names else {}
        vcard.add("n").value = vobject.vcard.Name(
            family=name.get("family_name", ""),
            given=name.get("given_name", ""),
            additional=name.get("middle_name", ""),
        )

        if contact.organizations:
            organization = contact.organizations[0]
            if organization.get("name"):
                vcard.add("org").value = [organization["name"]]
            self._add_vcard_field(vcard, "title", organization.get("title", ""))

        for email in contact.emails:
            self._add_typed_field(vcard, "email", email.get("value", ""), email.get("type"))

        for phone in contact.phones:
            self._add_typed_field(vcard, "tel", phone.get("value", ""), phone.get("type"))

        for address in contact.addresses:
            self._add_vcard_address(vcard, address)

        return vcard

    @staticmethod
    def _join(value: Union[str, List[str], None]) -> str:
        if isinstance(value, list):
            return " ".join(v for v in value if v).strip()
        return (value or "").strip()

    @staticmethod
    def _get_vcard_value(vcard, field: str):
        """Safely get single value from vCard field"""
        if field in vcard.contents:
            return vcard.contents[field][0].value
        return ""

    @staticmethod
    def _typed_entry(key: str, value: str, line) -> Dict:
        entry = {key: value}
        types = line.params.get("TYPE")
        if types:
            entry["type"] = types[0].lower()
        return entry

    def _parse_vcard_address(self, line) -> Optional[Dict]:
        """Parse vCard address into an address entry"""
        if not line.value:
            return None

        value = line.value
        entry = {
            "street": self._join(value.street),
            "locality": self._join(value.city),
            "region": self._join(value.region),
            "postal_code": self._join(value.code),
            "country": self._join(value.country),
        }
        entry = {k: v for k, v in entry.items() if v}
        if "LABEL" in line.params:
            entry["formatted_value"] = line.params["LABEL"][0]
        if not entry:
            return None

        types = line.params.get("TYPE")
        if types:
            entry["type"] = types[0].lower()
        return entry

    @staticmethod
    def _add_vcard_field(vcard, field: str, value: str) -> None:
        """Add field to vCard"""
        if value:
            vcard.add(field).value = value

    @staticmethod
    def _add_typed_field(vcard, field: str, value: str, type_label: Optional[str]) -> None:
        if not value:
            return
        line = vcard.add(field)
        line.value = value
        if type_label:
            line.type_param = type_label.upper()

    @staticmethod
    def _add_vcard_address(vcard, address: Dict) -> None:
        """Add address to vCard"""
        if not address:
            return

        line = vcard.add("adr")
        street = address.get("street", "")
        if not any(address.get(k) for k in ("street", "locality", "region", "postal_code", "country")):
            # Only a single-line form is known
            street = address.get("formatted_value", "")
        line.value = vobject.vcard.Address(
            street=street,
            city=address.get("locality", ""),
            region=address.get("region", ""),
            code=address.get("postal_code", ""),
            country=address.get("country", ""),
        )
        if address.get("formatted_value"):
            line.params["LABEL"] = [address["formatted_value"]]
        if address.get("type"):
            line.type_param = address["type"].upper()


class VCardDirectory(ContactDirectory):
    """A folder of .vcf files, one contact per file named <resource_id>.vcf"""

    def __init__(self, path: Union[str, Path] = settings.CONTACTS_DIR, encoding: str = settings.DEFAULT_ENCODING):
        self.path = Path(path)
        self.encoding = encoding
        self.handler = VCardHandler()

    def list(self, page_size: int) -> List[Contact]:
        if not self.path.is_dir():
            raise DirectoryError(f"Contact directory does not exist: {self.path}")

        files = sorted(self.path.glob("*.vcf"))[:page_size]
        logger.debug(f"Loading {len(files)} contact file(s) from {self.path}")
        return [self._read(file) for file in files]

    def get(self, resource_id: str) -> Contact:
        return self._read(self._existing_file(resource_id))

    def update(self, resource_id: str, fields: ContactFields) -> Contact:
        contact = self.get(resource_id)
        contact.apply_fields(fields)
        self._write(contact)
        logger.debug(f"Updated contact file {resource_id}.vcf")
        return contact

    def delete(self, resource_id: str) -> None:
        file = self._existing_file(resource_id)
        try:
            file.unlink()
        except OSError as e:
            raise DirectoryError(f"Failed to delete contact {resource_id}: {e}")
        logger.debug(f"Deleted contact file {file.name}")

    def create(self, contact: Contact) -> Contact:
        stored = contact.copy()
        if not stored.resource_id:
            stored.resource_id = uuid.uuid4().hex
        self._file(stored.resource_id)
        self.path.mkdir(parents=True, exist_ok=True)
        self._write(stored)
        return stored

    def _file(self, resource_id: str) -> Path:
        if not resource_id or not _RESOURCE_ID_PATTERN.fullmatch(resource_id):
            raise NotFoundError("Contact", resource_id)
        return self.path / f"{resource_id}.vcf"

    def _existing_file(self, resource_id: str) -> Path:
        file = self._file(resource_id)
        if not file.is_file():
            raise NotFoundError("Contact", resource_id)
        return file

    def _read(self, file: Path) -> Contact:
        try:
            vcard = vobject.readOne(file.read_text(encoding=self.encoding))
        except Exception as e:
            raise DirectoryError(f"Failed to read contact file {file}: {e}")
        return self.handler.vcard_to_contact(vcard, resource_id=file.stem)

    def _write(self, contact: Contact) -> None:
        file = self._file(contact.resource_id)
        text = self.handler.contact_to_vcard(contact).serialize()
        # Write beside the target and swap it in, so a failed write never truncates it
        tmp = tempfile.NamedTemporaryFile(
            "w", encoding=self.encoding, dir=self.path, prefix=f".{file.stem}.", suffix=".tmp", delete=False
        )
        try:
            with tmp:
                tmp.write(text)
            os.replace(tmp.name, file)
        except (OSError, UnicodeError) as e:
            Path(tmp.name).unlink(missing_ok=True)
            raise DirectoryError(f"Failed to write contact file {file}: {e}")
