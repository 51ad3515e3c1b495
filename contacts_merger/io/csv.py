import csv
import logging
from typing import List, Dict, Optional

from .. import settings
from ..core.contact import Contact
from ..processors.address import string_to_address_dict
from ..processors.phone import PhoneProcessor
from ..utils.validation import validate_contact_data, log_validation_results

logger = logging.getLogger(__name__)


class CSVHandler:
    """Reads contacts from CSV exports"""

    # Common CSV field mappings
    DEFAULT_FIELD_MAP = {
        "name": ["Full Name", "Name", "DisplayName", "Display Name"],
        "given_name": ["First Name", "FirstName", "Given Name"],
        "family_name": ["Last Name", "LastName", "Family Name"],
        "organization": ["Organization", "Company", "Business"],
        "title": ["Title", "Job Title"],
        "emails": ["Email", "E-mail", "E-mail Address", "E-mail 1", "Primary Email"],
        "phones": ["Phone", "Telephone", "Primary Phone", "Mobile", "Cell"],
        "address": ["Address", "Home Address", "Primary Address"],
    }

    # Cells that may hold several values
    MULTI_VALUE_FIELDS = ("emails", "phones")

    def __init__(self, field_map: Optional[Dict] = None, phone_processor: Optional[PhoneProcessor] = None):
        self.field_map = field_map or self.DEFAULT_FIELD_MAP
        self.phone_processor = phone_processor or PhoneProcessor()

    def read_csv(self, filepath: str, encoding: str = settings.DEFAULT_ENCODING) -> List[Contact]:
        """Read contacts from CSV file, skipping rows that fail validation"""
        contacts = []
        with open(filepath, "r", encoding=encoding, newline="") as csvfile:
            reader = csv.DictReader(csvfile)
            headers = self._normalize_headers(reader.fieldnames or [])

            for line_number, row in enumerate(reader, start=2):
                data = self._normalize_row(row, headers)
                results = validate_contact_data(data)
                log_validation_results(results, logger)
                if results["errors"]:
                    logger.warning(f"Skipping CSV line {line_number} in {filepath}")
                    continue
                contacts.append(self._to_contact(data))

        logger.info(f"Loaded {len(contacts)} contacts from {filepath}")
        return contacts

    def _normalize_headers(self, headers: List[str]) -> Dict[str, Optional[str]]:
        """Map CSV headers to contact field names"""
        header_map = {}
        for header in headers:
            normalized = None
            for field, variations in self.field_map.items():
                if header.strip() in variations or header.strip() == field:
                    normalized = field
                    break
            if normalized is None:
                logger.debug(f"Ignoring unknown CSV column: {header}")
            header_map[header] = normalized
        return header_map

    def _normalize_row(self, row: Dict, header_map: Dict) -> Dict:
        """Convert CSV row to standardized format"""
        normalized = {field: [] for field in self.MULTI_VALUE_FIELDS}
        for original_header, value in row.items():
            field = header_map.get(original_header)
            if not field or not value or not value.strip():
                continue
            if field in self.MULTI_VALUE_FIELDS:
                normalized[field].extend(self._split_merged_fields(value))
            else:
                normalized[field] = value.strip()

        if not normalized.get("name"):
            parts = [normalized.get("given_name"), normalized.get("family_name")]
            normalized["name"] = " ".join(p for p in parts if p)
        return normalized

    def _to_contact(self, data: Dict) -> Contact:
        contact = Contact()
        if data.get("name"):
            name = {"display_name": data["name"]}
            for key in ("given_name", "family_name"):
                if data.get(key):
                    name[key] = data[key]
            contact.names = [name]

        contact.emails = [{"value": email, "primary": idx == 0} for idx, email in enumerate(data["emails"])]
        phones = self.phone_processor.format_phone_list(data["phones"])
        contact.phones = [{"value": phone, "primary": idx == 0} for idx, phone in enumerate(phones)]

        if data.get("address"):
            address = string_to_address_dict(data["address"])
            address["primary"] = True
            contact.addresses = [address]

        if data.get("organization"):
            organization = {"name": data["organization"]}
            if data.get("title"):
                organization["title"] = data["title"]
            contact.organizations = [organization]
        return contact

    @staticmethod
    def _split_merged_fields(value: str) -> List[str]:
        """Split merged fields (e.g., multiple emails) into list"""
        if not value:
            return []
        return [v.strip() for v in value.replace(";", ",").split(",") if v.strip()]
