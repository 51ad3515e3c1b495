import copy
from typing import Callable, Dict, Iterable, List


def union_entries(
    entry_lists: Iterable[List[Dict]],
    key: Callable[[Dict], str],
) -> List[Dict]:
    """Ordered union of field entries, deduplicated by normalized key.

    The first list wins on conflicts. Entries whose key is empty are dropped.
    The first surviving entry becomes primary, all others non-primary.
    """
    merged = []
    seen = set()

    for entries in entry_lists:
        for entry in entries or []:
            entry_key = key(entry)
            if not entry_key or entry_key in seen:
                continue
            seen.add(entry_key)
            merged.append(copy.deepcopy(entry))

    for idx, entry in enumerate(merged):
        entry["primary"] = idx == 0

    return merged
