from pathlib import Path
from typing import Union

import pandas as pd

from ..core.deduplicator import AutoMergeOutcome
from ..core.matcher import DuplicateReport

DUPLICATE_COLUMNS = [
    "Group",
    "Kind",
    "Match Value",
    "Confidence",
    "Role",
    "Resource ID",
    "Name",
    "Email",
    "Phone",
]

MERGE_COLUMNS = ["Target", "Sources", "Success", "Deleted", "Error"]


def duplicates_to_frame(report: DuplicateReport) -> pd.DataFrame:
    """One row per contact per duplicate group"""
    rows = []
    for index, group in enumerate(report.groups, start=1):
        for position, contact in enumerate(group.contacts):
            rows.append(
                {
                    "Group": index,
                    "Kind": group.kind.value,
                    "Match Value": group.match_value,
                    "Confidence": group.confidence,
                    "Role": "target" if position == 0 else "source",
                    "Resource ID": contact.resource_id,
                    "Name": contact.display_name,
                    "Email": contact.primary_email,
                    "Phone": contact.primary_phone,
                }
            )
    return pd.DataFrame(rows, columns=DUPLICATE_COLUMNS)


def merge_outcome_to_frame(outcome: AutoMergeOutcome) -> pd.DataFrame:
    rows = [
        {
            "Target": group.target,
            "Sources": ";".join(group.sources),
            "Success": group.success,
            "Deleted": ";".join(group.deleted),
            "Error": group.error or "",
        }
        for group in outcome.per_group or []
    ]
    return pd.DataFrame(rows, columns=MERGE_COLUMNS)


def write_duplicates_report(report: DuplicateReport, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    duplicates_to_frame(report).to_csv(path, index=False)
    return path


def write_merge_report(outcome: AutoMergeOutcome, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    merge_outcome_to_frame(outcome).to_csv(path, index=False)
    return path
