#!/usr/bin/env python3

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from contacts_merger import settings
from contacts_merger.core.deduplicator import ContactDeduplicator
from contacts_merger.core.errors import ContactsError
from contacts_merger.core.matcher import DuplicateReport
from contacts_merger.core.merger import ContactMerger
from contacts_merger.io.csv import CSVHandler
from contacts_merger.io.directory import ContactDirectory, batch_create
from contacts_merger.io.report import write_duplicates_report, write_merge_report
from contacts_merger.io.vcard import VCardDirectory

RULE = "-" * 80


def parse_criteria(value: str) -> List[str]:
    return [c.strip() for c in value.split(",") if c.strip()]


def print_duplicates(report: DuplicateReport) -> None:
    print(f"Found {report.total_duplicates} duplicate group(s) in {report.total_contacts} contact(s)")
    if not report.groups:
        print("\nNo duplicates found! Your contacts are clean.")
        return

    print("\nDuplicate Groups:")
    print(RULE)
    for index, group in enumerate(report.groups, start=1):
        print(f"\n{index}. {group.kind.value.upper()} duplicate group ({group.confidence}% confidence)")
        print(f"   Match: {group.match_value}")
        for contact in group.contacts:
            details = ", ".join(filter(None, [contact.primary_email, contact.primary_phone]))
            suffix = f" <{details}>" if details else ""
            print(f"   - {contact.resource_id}: {contact.display_name or 'No name'}{suffix}")


def find_duplicates(directory: ContactDirectory, args: argparse.Namespace) -> None:
    deduplicator = ContactDeduplicator(directory)
    report = deduplicator.find_duplicates(args.criteria, args.threshold, args.max_results)
    print_duplicates(report)

    if args.report:
        path = write_duplicates_report(report, args.report)
        logging.info(f"Saved duplicate report to: {path}")


def merge_contacts(directory: ContactDirectory, args: argparse.Namespace) -> None:
    if not args.confirm:
        raise ContactsError(
            "Please use --confirm flag to confirm this operation",
            hint="main.py merge <target> <source...> --confirm",
        )

    merger = ContactMerger(directory)
    result = merger.merge_by_id(args.target, args.sources, delete_after_merge=True)

    print("Merge Results:")
    print(RULE)
    print(f"Target Contact: {result.merged.display_name or 'No name'}")
    print(f"Resource ID: {result.merged.resource_id}")
    print(f"Source Contacts: {len(result.sources)}")
    print(f"Deleted Contacts: {len(result.deleted)}")
    for failure in result.failed_deletes:
        print(f"Could not delete {failure.item}: {failure.error}")

    print("\nMerged Contact Details:")
    print(f"Emails: {len(result.merged.emails)}")
    print(f"Phones: {len(result.merged.phones)}")
    print(f"Addresses: {len(result.merged.addresses)}")


def auto_merge_contacts(directory: ContactDirectory, args: argparse.Namespace) -> None:
    dry_run = not args.confirm
    deduplicator = ContactDeduplicator(directory)
    outcome = deduplicator.auto_merge(args.criteria, args.threshold, args.max_results, dry_run=dry_run)

    if dry_run:
        print("Auto-Merge Preview:")
        print(RULE)
        print(f"Merge Operations: {outcome.operation_count}")
        if outcome.operation_count == 0:
            print("No duplicates to merge!")
        else:
            print(f"\nRe-run with --confirm to execute these {outcome.operation_count} merge operation(s)")
        return

    print("Auto-Merge Results:")
    print(RULE)
    print(f"Merge Operations: {outcome.operation_count}")
    print(f"Successful: {len(outcome.successful)}")
    if outcome.failed:
        print(f"Failed: {len(outcome.failed)}")
        print("\nFailed Operations:")
        for index, group in enumerate(outcome.failed, start=1):
            print(f"{index}. {group.target}: {group.error or 'Unknown error'}")

    if args.report:
        path = write_merge_report(outcome, args.report)
        logging.info(f"Saved merge report to: {path}")


def import_contacts(directory: ContactDirectory, args: argparse.Namespace) -> None:
    contacts = CSVHandler().read_csv(args.file)
    results = batch_create(directory, contacts)
    created = [r for r in results if r.success]
    print(f"Imported {len(created)} of {len(results)} contact(s) into {args.dir}")
    for failure in (r for r in results if not r.success):
        print(f"Failed to import {failure.item.display_name or 'contact'}: {failure.error}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find and merge duplicate contacts in a folder of vCard files."
    )
    parser.add_argument(
        "--dir",
        "-d",
        default=settings.CONTACTS_DIR,
        help="Folder holding one .vcf file per contact",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    duplicates = subparsers.add_parser("duplicates", help="List likely duplicate contacts")
    duplicates.add_argument(
        "--criteria", "-c",
        type=parse_criteria,
        default=list(settings.DEFAULT_CRITERIA),
        help="Comma separated match criteria: email, phone, name",
    )
    duplicates.add_argument("--threshold", "-t", type=int, default=settings.DUPLICATE_THRESHOLD,
                            help="Minimum name similarity (0-100)")
    duplicates.add_argument("--max-results", "-n", type=int, default=settings.MAX_RESULTS,
                            help="Maximum number of contacts to compare")
    duplicates.add_argument("--report", "-r", help="Write the duplicate groups to this CSV file")
    duplicates.set_defaults(handler=find_duplicates)

    merge = subparsers.add_parser("merge", help="Merge source contacts into a target contact")
    merge.add_argument("target", help="Resource ID of the contact to keep")
    merge.add_argument("sources", nargs="+", help="Resource IDs of the contacts to fold in and delete")
    merge.add_argument("--confirm", action="store_true", help="Confirm the merge")
    merge.set_defaults(handler=merge_contacts)

    auto_merge = subparsers.add_parser("auto-merge", help="Merge every duplicate group automatically")
    auto_merge.add_argument(
        "--criteria", "-c",
        type=parse_criteria,
        default=list(settings.AUTO_MERGE_CRITERIA),
        help="Comma separated match criteria: email, phone, name",
    )
    auto_merge.add_argument("--threshold", "-t", type=int, default=settings.AUTO_MERGE_THRESHOLD,
                            help="Minimum name similarity (0-100)")
    auto_merge.add_argument("--max-results", "-n", type=int, default=settings.MAX_RESULTS,
                            help="Maximum number of contacts to compare")
    auto_merge.add_argument("--confirm", action="store_true",
                            help="Execute the merges (default is a dry run)")
    auto_merge.add_argument("--report", "-r", help="Write the merge results to this CSV file")
    auto_merge.set_defaults(handler=auto_merge_contacts)

    import_parser = subparsers.add_parser("import", help="Add contacts from a CSV file")
    import_parser.add_argument("file", type=Path, help="CSV file to import")
    import_parser.set_defaults(handler=import_contacts)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbose flag
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    directory = VCardDirectory(args.dir)
    try:
        args.handler(directory, args)
    except ContactsError as e:
        logging.error(f"Error running {args.command}: {e}")
        print(f"Error: {e.message}", file=sys.stderr)
        if e.hint:
            print(e.hint, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
