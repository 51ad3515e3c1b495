"""
Contact directories: where contacts are listed from and written back to.

The matching and merge code only talks to a ContactDirectory, so any store
that can list, get, update, create and delete records can be plugged in.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..core.contact import Contact
from ..core.errors import NotFoundError
from ..core.types import ContactFields
from ..utils.batch import BatchItemResult, BatchRunner

logger = logging.getLogger(__name__)


class ContactDirectory(ABC):
    @abstractmethod
    def list(self, page_size: int) -> List[Contact]:
        """Return at most page_size contacts"""

    @abstractmethod
    def get(self, resource_id: str) -> Contact:
        """Return one contact, raising NotFoundError if it does not exist"""

    @abstractmethod
    def update(self, resource_id: str, fields: ContactFields) -> Contact:
        """Replace the given field groups and return the updated contact"""

    @abstractmethod
    def delete(self, resource_id: str) -> None:
        """Remove a contact"""

    @abstractmethod
    def create(self, contact: Contact) -> Contact:
        """Store a new contact and return it with its resource id"""


class InMemoryDirectory(ContactDirectory):
    """Directory kept in a dictionary, in insertion order"""

    def __init__(self, contacts: Optional[Iterable[Contact]] = None):
        self._contacts = {}
        self._lock = threading.Lock()
        for contact in contacts or []:
            self.create(contact)

    def list(self, page_size: int) -> List[Contact]:
        with self._lock:
            return [c.copy() for c in list(self._contacts.values())[:page_size]]

    def get(self, resource_id: str) -> Contact:
        with self._lock:
            if resource_id not in self._contacts:
                raise NotFoundError("Contact", resource_id)
            return self._contacts[resource_id].copy()

    def update(self, resource_id: str, fields: ContactFields) -> Contact:
        with self._lock:
            if resource_id not in self._contacts:
                raise NotFoundError("Contact", resource_id)
            self._contacts[resource_id].apply_fields(fields)
            return self._contacts[resource_id].copy()

    def delete(self, resource_id: str) -> None:
        with self._lock:
            if resource_id not in self._contacts:
                raise NotFoundError("Contact", resource_id)
            del self._contacts[resource_id]

    def create(self, contact: Contact) -> Contact:
        stored = contact.copy()
        if not stored.resource_id:
            stored.resource_id = uuid.uuid4().hex
        with self._lock:
            self._contacts[stored.resource_id] = stored
        return stored.copy()

    def __len__(self) -> int:
        return len(self._contacts)

    def __contains__(self, resource_id: str) -> bool:
        return resource_id in self._contacts


def batch_create(
    directory: ContactDirectory,
    contacts: Iterable[Contact],
    runner: Optional[BatchRunner] = None,
) -> List[BatchItemResult]:
    """Create contacts in paced batches; one failure does not stop the rest"""
    runner = runner or BatchRunner()
    results = runner.run(list(contacts), directory.create)
    created = sum(1 for r in results if r.success)
    logger.info(f"Created {created} of {len(results)} contacts")
    return results


def batch_delete(
    directory: ContactDirectory,
    resource_ids: Iterable[str],
    runner: Optional[BatchRunner] = None,
) -> List[BatchItemResult]:
    """Delete contacts in paced batches; one failure does not stop the rest"""
    runner = runner or BatchRunner()
    results = runner.run(list(resource_ids), directory.delete)
    deleted = sum(1 for r in results if r.success)
    logger.info(f"Deleted {deleted} of {len(results)} contacts")
    return results
