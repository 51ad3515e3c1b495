import logging
from typing import Iterable, List, Optional

from .. import settings
from ..io.directory import ContactDirectory
from ..utils.validation import validate_criteria, validate_max_results, validate_threshold
from .contact import Contact
from .matcher import ContactMatcher, DuplicateReport
from .merger import ContactMerger

logger = logging.getLogger(__name__)


class GroupMergeOutcome:
    def __init__(
        self,
        target: str,
        sources: List[str],
        success: bool,
        error: Optional[str] = None,
        deleted: Optional[List[str]] = None,
    ):
        self.target = target
        self.sources = sources
        self.success = success
        self.error = error
        self.deleted = deleted or []

    def __repr__(self) -> str:
        status = "ok" if self.success else f"failed: {self.error}"
        return f"GroupMergeOutcome({self.target!r} <- {self.sources!r}, {status})"


class AutoMergeOutcome:
    def __init__(self, operation_count: int, per_group: Optional[List[GroupMergeOutcome]] = None):
        self.operation_count = operation_count
        self.per_group = per_group

    @property
    def successful(self) -> List[GroupMergeOutcome]:
        return [g for g in self.per_group or [] if g.success]

    @property
    def failed(self) -> List[GroupMergeOutcome]:
        return [g for g in self.per_group or [] if not g.success]


class ContactDeduplicator:
    """Finds duplicates in a directory and merges them group by group"""

    def __init__(
        self,
        directory: ContactDirectory,
        matcher: Optional[ContactMatcher] = None,
        merger: Optional[ContactMerger] = None,
    ):
        self.directory = directory
        self.matcher = matcher or ContactMatcher()
        self.merger = merger or ContactMerger(directory)

    def find_duplicates(
        self,
        criteria: Iterable = settings.DEFAULT_CRITERIA,
        threshold: int = settings.DUPLICATE_THRESHOLD,
        max_results: int = settings.MAX_RESULTS,
    ) -> DuplicateReport:
        kinds = validate_criteria(criteria)
        validate_threshold(threshold)
        validate_max_results(max_results)

        contacts = self.directory.list(max_results)
        logger.info(f"Searching {len(contacts)} contact(s) for duplicates")
        return self.matcher.find_duplicates(contacts, kinds, threshold)

    def auto_merge(
        self,
        criteria: Iterable = settings.AUTO_MERGE_CRITERIA,
        threshold: int = settings.AUTO_MERGE_THRESHOLD,
        max_results: int = settings.MAX_RESULTS,
        dry_run: bool = True,
    ) -> AutoMergeOutcome:
        """Merge every duplicate group found in a fresh listing"""
        validate_max_results(max_results)
        contacts = self.directory.list(max_results)
        return self.auto_merge_contacts(contacts, criteria, threshold, dry_run)

    def auto_merge_contacts(
        self,
        contacts: List[Contact],
        criteria: Iterable = settings.AUTO_MERGE_CRITERIA,
        threshold: int = settings.AUTO_MERGE_THRESHOLD,
        dry_run: bool = True,
    ) -> AutoMergeOutcome:
        """Merge each group into its first contact.

        Each group is re-read from the directory before it is merged. In a
        dry run nothing is written and only the number of merges that
        would happen is returned. Otherwise a failing group is recorded and
        the remaining groups are still merged.
        """
        kinds = validate_criteria(criteria)
        validate_threshold(threshold)

        report = self.matcher.find_duplicates(contacts, kinds, threshold)
        groups = [g for g in report.groups if len(g.contacts) >= 2]

        if dry_run:
            logger.info(f"Dry run: {len(groups)} merge operation(s) would be executed")
            return AutoMergeOutcome(len(groups))

        per_group: List[GroupMergeOutcome] = []
        for group in groups:
            target_id = group.target.resource_id
            source_ids = [s.resource_id for s in group.sources]
            try:
                # Earlier groups may have rewritten or deleted these contacts
                result = self.merger.merge_by_id(target_id, source_ids, delete_after_merge=True)
                per_group.append(GroupMergeOutcome(target_id, source_ids, True, deleted=result.deleted))
            except Exception as e:
                logger.warning(f"Failed to merge group into {target_id}: {e}")
                per_group.append(GroupMergeOutcome(target_id, source_ids, False, error=str(e)))

        outcome = AutoMergeOutcome(len(groups), per_group)
        logger.info(
            f"Executed {outcome.operation_count} merge operation(s): "
            f"{len(outcome.successful)} succeeded, {len(outcome.failed)} failed"
        )
        return outcome
