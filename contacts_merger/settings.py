"""
Configuration settings for the contacts merger.
All threshold values are on a scale of 0-100.
Every value can be overridden from the environment or a .env file.
"""

import os
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


###################
# Contact Directory
###################

# Folder holding one .vcf file per contact
CONTACTS_DIR: str = os.getenv("CONTACTS_DIR", "contacts")

# Default encoding for reading and writing contact files
DEFAULT_ENCODING: str = os.getenv("CONTACTS_ENCODING", "utf-8")

###################
# Matching Thresholds
###################

# Minimum name similarity for the duplicate search
DUPLICATE_THRESHOLD: int = _env_int("DUPLICATE_THRESHOLD", 80)

# Auto-merge acts without review, so it asks for near-identical names
AUTO_MERGE_THRESHOLD: int = _env_int("AUTO_MERGE_THRESHOLD", 95)

# Shorter phone numbers (extensions, short codes) are not identifying
MIN_PHONE_DIGITS: int = _env_int("MIN_PHONE_DIGITS", 7)

# Criteria used when none are given on the command line
DEFAULT_CRITERIA: Tuple[str, ...] = _env_list("DEFAULT_CRITERIA", ("email", "phone", "name"))
AUTO_MERGE_CRITERIA: Tuple[str, ...] = _env_list("AUTO_MERGE_CRITERIA", ("email",))

###################
# Processing Options
###################

# Upper bound on the candidate set; name matching is quadratic
MAX_RESULTS: int = _env_int("MAX_RESULTS", 1000)

# Writes and deletes are sent in small concurrent batches
BATCH_SIZE: int = _env_int("BATCH_SIZE", 5)

# Pause between batches to stay under rate limits
BATCH_DELAY_MS: int = _env_int("BATCH_DELAY_MS", 100)
