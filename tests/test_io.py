import pandas as pd

from contacts_merger.core.contact import Contact
from contacts_merger.core.deduplicator import AutoMergeOutcome, GroupMergeOutcome
from contacts_merger.core.matcher import ContactMatcher
from contacts_merger.core.types import MatchKind
from contacts_merger.io.csv import CSVHandler
from contacts_merger.io.report import (
    DUPLICATE_COLUMNS,
    duplicates_to_frame,
    merge_outcome_to_frame,
    write_duplicates_report,
    write_merge_report,
)
from contacts_merger.processors.phone import PhoneProcessor

CSV_TEXT = """Name,E-mail Address,Mobile,Company,Address,Notes
Jane Doe,jane@x.com,(415) 555-0123; 415 555 0123,Acme,"1 Main St, Springfield",friend
,bob@y.com,,,,
Broken Email,not-an-email,,,,
,,,Only A Company,,
"""


def test_read_csv(tmp_path):
    path = tmp_path / "contacts.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")

    contacts = CSVHandler().read_csv(str(path))

    assert len(contacts) == 2
    jane, bob = contacts
    assert jane.display_name == "Jane Doe"
    assert jane.primary_email == "jane@x.com"
    assert [p["value"] for p in jane.phones] == ["+14155550123"]
    assert jane.organization == "Acme"
    assert jane.primary_address == "1 Main St, Springfield"
    assert jane.resource_id == ""
    assert bob.display_name == ""
    assert bob.primary_email == "bob@y.com"


def test_read_csv_builds_name_from_parts(tmp_path):
    path = tmp_path / "contacts.csv"
    path.write_text("First Name,Last Name,Email\nAnn,Lee,ann@x.com\n", encoding="utf-8")

    contact = CSVHandler().read_csv(str(path))[0]
    assert contact.display_name == "Ann Lee"
    assert contact.names[0]["given_name"] == "Ann"
    assert contact.names[0]["family_name"] == "Lee"


def test_phone_processor():
    processor = PhoneProcessor()
    assert processor.format_phone("(415) 555-0123") == "+14155550123"
    assert processor.format_phone("") == ""
    assert processor.format_phone_list("415-555-0123, +1 415 555 0123") == ["+14155550123"]


def test_duplicates_report(tmp_path):
    contacts = [
        Contact.create("a", name="Jane Doe", email="jane@x.com"),
        Contact.create("b", name="Jane D", email="jane@x.com", phone="555-123-4567"),
    ]
    report = ContactMatcher().find_duplicates(contacts, {MatchKind.EMAIL}, 80)

    frame = duplicates_to_frame(report)
    assert list(frame.columns) == DUPLICATE_COLUMNS
    assert len(frame) == 2
    assert list(frame["Role"]) == ["target", "source"]
    assert list(frame["Resource ID"]) == ["a", "b"]

    path = write_duplicates_report(report, tmp_path / "out" / "duplicates.csv")
    loaded = pd.read_csv(path)
    assert list(loaded["Kind"]) == ["email", "email"]
    assert list(loaded["Confidence"]) == [100, 100]


def test_empty_duplicates_report():
    report = ContactMatcher().find_duplicates([], {MatchKind.EMAIL}, 80)
    frame = duplicates_to_frame(report)
    assert frame.empty
    assert list(frame.columns) == DUPLICATE_COLUMNS


def test_merge_report(tmp_path):
    outcome = AutoMergeOutcome(
        2,
        [
            GroupMergeOutcome("a", ["b", "c"], True, deleted=["b", "c"]),
            GroupMergeOutcome("d", ["e"], False, error="Update rejected"),
        ],
    )
    frame = merge_outcome_to_frame(outcome)
    assert list(frame["Sources"]) == ["b;c", "e"]
    assert list(frame["Success"]) == [True, False]

    path = write_merge_report(outcome, tmp_path / "merge.csv")
    assert pd.read_csv(path)["Error"].fillna("").tolist() == ["", "Update rejected"]
