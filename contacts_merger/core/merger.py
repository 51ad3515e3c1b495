import logging
from typing import List, Optional

from ..io.directory import ContactDirectory, batch_delete
from ..processors.address import merge_addresses
from ..processors.email import merge_emails
from ..processors.phone import merge_phones
from ..utils.batch import BatchItemResult, BatchRunner
from ..utils.validation import validate_resource_id
from .contact import Contact
from .errors import ValidationError
from .types import ContactFields

logger = logging.getLogger(__name__)


class MergeResult:
    def __init__(
        self,
        merged: Contact,
        sources: List[Contact],
        deleted: List[str],
        delete_results: Optional[List[BatchItemResult]] = None,
    ):
        self.merged = merged
        self.sources = sources
        self.deleted = deleted
        self.delete_results = delete_results or []

    @property
    def failed_deletes(self) -> List[BatchItemResult]:
        return [r for r in self.delete_results if not r.success]

    @property
    def fully_merged(self) -> bool:
        """False when some requested source deletions did not go through"""
        return not self.failed_deletes


class ContactMerger:
    """Folds source contacts into a target contact and writes it back.

    Emails, phones and addresses are unioned; the target keeps its own names
    and organizations.
    """

    def __init__(self, directory: ContactDirectory, batch_runner: Optional[BatchRunner] = None):
        self.directory = directory
        self.batch_runner = batch_runner or BatchRunner()

    def build_merged(self, target: Contact, sources: List[Contact]) -> ContactFields:
        """Merged field groups for the target, without touching the directory"""
        return {
            "emails": merge_emails(target.emails, *[s.emails for s in sources]),
            "phones": merge_phones(target.phones, *[s.phones for s in sources]),
            "addresses": merge_addresses(target.addresses, *[s.addresses for s in sources]),
        }

    def merge(self, target: Contact, sources: List[Contact], delete_after_merge: bool = False) -> MergeResult:
        """Merge sources into target; update failures propagate to the caller"""
        fields = self.build_merged(target, sources)

        logger.info(f"Merging {len(sources)} contact(s) into {target.resource_id}")
        merged = self.directory.update(target.resource_id, fields)

        deleted: List[str] = []
        delete_results: List[BatchItemResult] = []
        if delete_after_merge and sources:
            delete_results = batch_delete(
                self.directory, [s.resource_id for s in sources], runner=self.batch_runner
            )
            deleted = [r.item for r in delete_results if r.success]
            for failure in (r for r in delete_results if not r.success):
                logger.warning(
                    f"Merged into {target.resource_id} but could not delete {failure.item}: {failure.error}"
                )

        return MergeResult(merged, sources, deleted, delete_results)

    def merge_by_id(
        self, target_id: str, source_ids: List[str], delete_after_merge: bool = False
    ) -> MergeResult:
        """Fetch the named contacts from the directory and merge them"""
        target_id = validate_resource_id(target_id, "target")
        source_ids = list(dict.fromkeys(validate_resource_id(s, "source") for s in source_ids))
        if not source_ids:
            raise ValidationError("source", "At least one source contact is required")
        if target_id in source_ids:
            raise ValidationError("source", "Target contact cannot also be a source")

        target = self.directory.get(target_id)
        sources = [self.directory.get(source_id) for source_id in source_ids]
        return self.merge(target, sources, delete_after_merge=delete_after_merge)
