import logging
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Set, Tuple

from .. import settings
from ..utils.similarity import similarity
from ..utils.string import normalize_email, normalize_phone
from .contact import Contact
from .types import MatchKind

logger = logging.getLogger(__name__)


class DuplicateGroup:
    """Contacts that likely describe the same person"""

    def __init__(self, kind: MatchKind, match_value: str, confidence: int, contacts: List[Contact]):
        self.kind = kind
        self.match_value = match_value
        self.confidence = confidence
        self.contacts = contacts

    @property
    def target(self) -> Contact:
        return self.contacts[0]

    @property
    def sources(self) -> List[Contact]:
        return self.contacts[1:]

    @property
    def resource_ids(self) -> List[str]:
        return [c.resource_id for c in self.contacts]

    def __repr__(self) -> str:
        return (
            f"DuplicateGroup({self.kind.value}, {self.match_value!r}, "
            f"confidence={self.confidence}, contacts={self.resource_ids})"
        )


class DuplicateReport:
    def __init__(self, groups: List[DuplicateGroup], total_contacts: int):
        self.groups = groups
        self.total_contacts = total_contacts

    @property
    def total_duplicates(self) -> int:
        return len(self.groups)

    def __iter__(self):
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)


def pair_key(contact1: Contact, contact2: Contact) -> Tuple[str, str]:
    return tuple(sorted((contact1.resource_id, contact2.resource_id)))


class ContactMatcher:
    """Three-phase duplicate detection: exact email, exact phone, fuzzy name.

    Pairs found by an exact phase are claimed and never reported again by
    the name phase.
    """

    def __init__(self, min_phone_digits: int = settings.MIN_PHONE_DIGITS):
        self.min_phone_digits = min_phone_digits

    def find_duplicates(
        self,
        contacts: List[Contact],
        criteria: Iterable[MatchKind] = (MatchKind.EMAIL, MatchKind.PHONE, MatchKind.NAME),
        threshold: int = settings.DUPLICATE_THRESHOLD,
    ) -> DuplicateReport:
        """Find groups of duplicate contacts, highest confidence first"""
        criteria = {MatchKind.parse(c) if isinstance(c, str) else c for c in criteria}
        if not contacts:
            return DuplicateReport([], 0)

        groups: List[DuplicateGroup] = []
        claimed: Set[Tuple[str, str]] = set()

        if MatchKind.EMAIL in criteria:
            groups.extend(self._exact_groups(contacts, MatchKind.EMAIL, self._email_key, claimed))

        if MatchKind.PHONE in criteria:
            groups.extend(self._exact_groups(contacts, MatchKind.PHONE, self._phone_key, claimed))

        if MatchKind.NAME in criteria:
            groups.extend(self._name_groups(contacts, threshold, claimed))

        # sort is stable, ties keep phase order
        groups.sort(key=lambda g: g.confidence, reverse=True)

        logger.info(f"Found {len(groups)} duplicate group(s) in {len(contacts)} contact(s)")
        return DuplicateReport(groups, len(contacts))

    def _email_key(self, contact: Contact) -> str:
        return normalize_email(contact.primary_email)

    def _phone_key(self, contact: Contact) -> str:
        phone = normalize_phone(contact.primary_phone)
        return phone if len(phone) >= self.min_phone_digits else ""

    def _exact_groups(
        self,
        contacts: List[Contact],
        kind: MatchKind,
        key_func: Callable[[Contact], str],
        claimed: Set[Tuple[str, str]],
    ) -> List[DuplicateGroup]:
        """Group contacts sharing the same primary value"""
        index: Dict[str, List[Contact]] = defaultdict(list)
        for contact in contacts:
            key = key_func(contact)
            if key:
                index[key].append(contact)

        groups = []
        for key, matches in index.items():
            if len(matches) < 2:
                continue
            groups.append(DuplicateGroup(kind, key, 100, matches))
            for i in range(len(matches)):
                for j in range(i + 1, len(matches)):
                    claimed.add(pair_key(matches[i], matches[j]))

        logger.debug(f"{kind.value} phase: {len(groups)} group(s)")
        return groups

    def _name_groups(
        self,
        contacts: List[Contact],
        threshold: int,
        claimed: Set[Tuple[str, str]],
    ) -> List[DuplicateGroup]:
        """Pairwise fuzzy name comparison over unclaimed pairs"""
        groups = []
        names = [c.display_name for c in contacts]

        for i in range(len(contacts)):
            if not names[i]:
                continue
            for j in range(i + 1, len(contacts)):
                if not names[j]:
                    continue
                key = pair_key(contacts[i], contacts[j])
                if key in claimed:
                    continue

                score = similarity(names[i], names[j])
                if score >= threshold:
                    groups.append(DuplicateGroup(MatchKind.NAME, names[i], score, [contacts[i], contacts[j]]))
                    claimed.add(key)

        logger.debug(f"name phase: {len(groups)} group(s) at threshold {threshold}")
        return groups
