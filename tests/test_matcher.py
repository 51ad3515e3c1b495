import itertools

from contacts_merger.core.contact import Contact
from contacts_merger.core.matcher import ContactMatcher, pair_key
from contacts_merger.core.types import MatchKind

EMAIL = {MatchKind.EMAIL}
ALL = {MatchKind.EMAIL, MatchKind.PHONE, MatchKind.NAME}


def test_empty_input():
    report = ContactMatcher().find_duplicates([], ALL, 80)
    assert report.groups == []
    assert report.total_contacts == 0
    assert report.total_duplicates == 0


def test_exact_email_scenario():
    contacts = [
        Contact.create("a", name="Jane Doe", email="jane@x.com"),
        Contact.create("b", name="Jane Doe", email="JANE@x.com"),
        Contact.create("c", name="Bob Lee", email="bob@y.com"),
    ]
    report = ContactMatcher().find_duplicates(contacts, EMAIL, 80)

    assert len(report.groups) == 1
    group = report.groups[0]
    assert group.kind == MatchKind.EMAIL
    assert group.confidence == 100
    assert group.match_value == "jane@x.com"
    assert group.resource_ids == ["a", "b"]
    assert report.total_contacts == 3


def test_only_primary_email_is_compared():
    first = Contact.create("a", email="one@x.com")
    second = Contact.create("b", email="two@x.com")
    second.emails.append({"value": "one@x.com", "primary": False})

    report = ContactMatcher().find_duplicates([first, second], EMAIL, 80)
    assert report.groups == []


def test_phone_groups_need_seven_digits():
    contacts = [
        Contact.create("a", phone="123-456"),
        Contact.create("b", phone="123456"),
        Contact.create("c", phone="+1 (555) 123-4567"),
        Contact.create("d", phone="15551234567"),
    ]
    report = ContactMatcher().find_duplicates(contacts, {MatchKind.PHONE}, 80)

    assert len(report.groups) == 1
    assert report.groups[0].kind == MatchKind.PHONE
    assert report.groups[0].match_value == "15551234567"
    assert report.groups[0].resource_ids == ["c", "d"]


def test_email_and_phone_can_group_the_same_pair():
    contacts = [
        Contact.create("a", name="Jane Doe", email="jane@x.com", phone="555-123-4567"),
        Contact.create("b", name="Jane Doe", email="jane@x.com", phone="5551234567"),
    ]
    report = ContactMatcher().find_duplicates(contacts, ALL, 80)

    kinds = [g.kind for g in report.groups]
    assert kinds == [MatchKind.EMAIL, MatchKind.PHONE]


def test_claimed_pairs_are_skipped_by_name_phase():
    contacts = [
        Contact.create("a", name="Jane Doe", email="jane@x.com"),
        Contact.create("b", name="Jane Doe", email="jane@x.com"),
    ]
    report = ContactMatcher().find_duplicates(contacts, {MatchKind.EMAIL, MatchKind.NAME}, 80)
    assert [g.kind for g in report.groups] == [MatchKind.EMAIL]

    # without the email phase the same pair is found by name
    report = ContactMatcher().find_duplicates(contacts, {MatchKind.NAME}, 80)
    assert [g.kind for g in report.groups] == [MatchKind.NAME]
    assert report.groups[0].confidence == 100


def test_name_threshold():
    contacts = [
        Contact.create("a", name="Robert Johnson"),
        Contact.create("b", name="Robert Jonson"),
    ]
    matcher = ContactMatcher()

    assert matcher.find_duplicates(contacts, {MatchKind.NAME}, 95).groups == []

    groups = matcher.find_duplicates(contacts, {MatchKind.NAME}, 90).groups
    assert len(groups) == 1
    assert groups[0].kind == MatchKind.NAME
    assert groups[0].confidence == 93
    assert groups[0].match_value == "Robert Johnson"
    assert groups[0].resource_ids == ["a", "b"]


def test_contacts_without_names_are_not_name_matched():
    contacts = [Contact.create("a", email="a@x.com"), Contact.create("b", email="b@x.com")]
    assert ContactMatcher().find_duplicates(contacts, {MatchKind.NAME}, 0).groups == []


def test_name_from_parts():
    first = Contact("a", names=[{"given_name": "Jane", "family_name": "Doe"}])
    second = Contact.create("b", name="jane doe")
    groups = ContactMatcher().find_duplicates([first, second], {MatchKind.NAME}, 100).groups
    assert len(groups) == 1
    assert groups[0].match_value == "Jane Doe"


def test_groups_sorted_by_confidence():
    contacts = [
        Contact.create("a", name="Robert Johnson"),
        Contact.create("b", name="Robert Jonson"),
        Contact.create("c", name="Maria Lopez", email="maria@x.com"),
        Contact.create("d", name="M. Lopez", email="maria@x.com"),
        Contact.create("e", name="Ann Lee"),
        Contact.create("f", name="Ann Lee"),
    ]
    groups = ContactMatcher().find_duplicates(contacts, ALL, 90).groups

    assert [g.confidence for g in groups] == [100, 100, 93]
    # ties keep discovery order: email phase before name phase
    assert groups[0].kind == MatchKind.EMAIL
    assert groups[1].kind == MatchKind.NAME
    assert groups[1].resource_ids == ["e", "f"]


def test_every_group_has_two_contacts(sample_contacts):
    report = ContactMatcher().find_duplicates(sample_contacts, ALL, 50)
    assert report.groups
    for group in report.groups:
        assert len(group.contacts) >= 2
        assert 0 <= group.confidence <= 100
        assert isinstance(group.confidence, int)


def test_no_pair_reported_twice_by_name_phase():
    names = ["Anna Berg", "Ana Berg", "Anna Burg", "Hanna Berg", "Anna Berg", "Anne Berg"]
    contacts = [Contact.create(f"id{i}", name=n, email="shared@x.com" if i < 2 else "") for i, n in enumerate(names)]
    report = ContactMatcher().find_duplicates(contacts, ALL, 70)

    exact_pairs = set()
    for group in report.groups:
        if group.kind != MatchKind.NAME:
            exact_pairs.update(pair_key(a, b) for a, b in itertools.combinations(group.contacts, 2))

    name_pairs = [pair_key(*g.contacts) for g in report.groups if g.kind == MatchKind.NAME]
    assert len(name_pairs) == len(set(name_pairs))
    assert not exact_pairs & set(name_pairs)
    assert ("id0", "id1") in exact_pairs
