import pytest

from contacts_merger.core.contact import Contact
from contacts_merger.core.errors import DirectoryError
from contacts_merger.io.directory import InMemoryDirectory
from contacts_merger.utils.batch import BatchRunner


class RecordingDirectory(InMemoryDirectory):
    """In-memory directory that records writes and fails on chosen ids"""

    def __init__(self, contacts=None, fail_update=(), fail_delete=()):
        super().__init__(contacts)
        self.fail_update = set(fail_update)
        self.fail_delete = set(fail_delete)
        self.updates = []
        self.deletes = []

    def update(self, resource_id, fields):
        self.updates.append(resource_id)
        if resource_id in self.fail_update:
            raise DirectoryError(f"Update rejected for {resource_id}")
        return super().update(resource_id, fields)

    def delete(self, resource_id):
        self.deletes.append(resource_id)
        if resource_id in self.fail_delete:
            raise DirectoryError(f"Delete rejected for {resource_id}")
        super().delete(resource_id)


@pytest.fixture
def no_wait_runner():
    """Batch runner that records its pauses instead of sleeping"""
    pauses = []
    runner = BatchRunner(batch_size=5, delay=0.1, sleep=pauses.append)
    runner.pauses = pauses
    return runner


@pytest.fixture
def sample_contacts():
    return [
        Contact.create("c1", name="Jane Doe", email="jane@x.com", phone="555-123-4567"),
        Contact.create("c2", name="Jane Doe", email="JANE@x.com"),
        Contact.create("c3", name="Bob Lee", email="bob@y.com", phone="(555) 123-4567"),
        Contact.create("c4", name="Robert Johnson", email="rj@z.com"),
        Contact.create("c5", name="Robert Jonson"),
        Contact.create("c6", name="Alice Walker", phone="12345"),
        Contact.create("c7", name="Carol King", phone="123-45"),
    ]


@pytest.fixture
def directory(sample_contacts):
    return RecordingDirectory(sample_contacts)
