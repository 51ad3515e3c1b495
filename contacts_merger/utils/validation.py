from typing import Dict, List, Iterable, Optional, Tuple
import re
import logging

from ..core.errors import ValidationError
from ..core.types import MatchKind
from .string import normalize_phone


def validate_email(email: str) -> bool:
    """Validate email format"""
    if not email:
        return False

    # Basic email regex pattern
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email.strip()))


def validate_phone(phone: str, min_digits: int = 7) -> bool:
    """Validate phone number format"""
    if not phone:
        return False

    # Remove all non-digit characters except + for international prefix
    cleaned = re.sub(r"[^\d+]", "", phone)

    return len(normalize_phone(cleaned)) >= min_digits and bool(re.match(r"^\+?\d+$", cleaned))


def validate_threshold(threshold: int) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, int):
        raise ValidationError("threshold", "Must be a whole number")
    if threshold < 0 or threshold > 100:
        raise ValidationError("threshold", "Must be between 0 and 100")
    return threshold


def validate_max_results(max_results: int, max_value: int = 10000, min_value: int = 1) -> int:
    if max_results < min_value or max_results > max_value:
        raise ValidationError("max_results", f"Must be between {min_value} and {max_value}")
    return max_results


def validate_resource_id(resource_id: str, field: str = "resource_id") -> str:
    if not resource_id or not resource_id.strip():
        raise ValidationError(field, "ID cannot be empty")
    return resource_id.strip()


def validate_criteria(criteria: Iterable) -> Tuple[MatchKind, ...]:
    """Parse criteria names into MatchKinds, keeping the given order"""
    kinds: List[MatchKind] = []
    for item in criteria:
        if isinstance(item, MatchKind):
            kind = item
        else:
            try:
                kind = MatchKind.parse(str(item))
            except ValueError:
                allowed = ", ".join(k.value for k in MatchKind)
                raise ValidationError("criteria", f"Unknown criterion '{item}' (expected {allowed})")
        if kind not in kinds:
            kinds.append(kind)

    if not kinds:
        raise ValidationError("criteria", "At least one criterion is required")
    return tuple(kinds)


def validate_contact_data(data: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """Validate an imported contact row"""
    validation_results = {"errors": [], "warnings": []}

    if not data:
        validation_results["errors"].append("Empty contact data")
        return validation_results

    if not any(data.get(field) for field in ("name", "emails", "phones")):
        validation_results["errors"].append("Contact needs a name, an email or a phone")
        return validation_results

    for email in data.get("emails", []):
        if not validate_email(email):
            validation_results["errors"].append(f"Invalid email format: {email}")

    for phone in data.get("phones", []):
        if not validate_phone(phone):
            validation_results["warnings"].append(f"Suspicious phone format: {phone}")

    return validation_results


def log_validation_results(
    results: Dict[str, List[str]], logger: Optional[logging.Logger] = None
) -> None:
    """Log validation results with appropriate severity"""
    if logger is None:
        logger = logging.getLogger(__name__)

    for error in results["errors"]:
        logger.error(f"Validation error: {error}")

    for warning in results["warnings"]:
        logger.warning(f"Validation warning: {warning}")
