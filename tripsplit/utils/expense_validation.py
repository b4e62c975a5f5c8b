"""Expense validation utilities."""
import math
from typing import Dict, Iterable, List, Optional

from tripsplit.core.config import settings


class ExpenseValidationError(Exception):
    """Custom exception for expense validation errors."""
    pass


def validate_amount(amount) -> None:
    """Amount must be a positive finite number."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ExpenseValidationError(f"Amount must be a number, got {amount!r}")
    if not math.isfinite(amount) or amount <= 0:
        raise ExpenseValidationError(f"Amount must be positive, got {amount}")


def validate_payer(payer_id: str, member_ids: Iterable[str]) -> None:
    if not payer_id or payer_id not in set(member_ids):
        raise ExpenseValidationError(f"Payer '{payer_id}' is not a known member")


def validate_participants(participant_ids: List[str], member_ids: Iterable[str]) -> None:
    """
    Validate the participant set.

    Rules:
    - At least one participant
    - No duplicates
    - Every participant is a known member
    """
    if not participant_ids:
        raise ExpenseValidationError("Select at least one participant to split with")

    if len(set(participant_ids)) != len(participant_ids):
        raise ExpenseValidationError("Participants must be unique")

    known = set(member_ids)
    unknown = [pid for pid in participant_ids if pid not in known]
    if unknown:
        raise ExpenseValidationError(f"Unknown participants: {', '.join(unknown)}")


def validate_custom_split(
    amount: float,
    participant_ids: List[str],
    custom_split: Optional[Dict[str, float]],
    tolerance: float = settings.SPLIT_TOLERANCE
) -> None:
    """
    Validate a custom split.

    Rules:
    - Every key is one of the expense participants
    - Every value is a non-negative finite number
    - Values sum to the expense amount (within tolerance)
    """
    if not custom_split:
        return

    participants = set(participant_ids)
    strangers = [pid for pid in custom_split if pid not in participants]
    if strangers:
        raise ExpenseValidationError(
            f"Custom split references non-participants: {', '.join(strangers)}"
        )

    for pid, share in custom_split.items():
        if isinstance(share, bool) or not isinstance(share, (int, float)) or not math.isfinite(share) or share < 0:
            raise ExpenseValidationError(f"Custom split for '{pid}' must be a non-negative number")

    split_sum = sum(custom_split.values())
    if abs(split_sum - amount) > tolerance:
        raise ExpenseValidationError(
            f"Custom split sum ({split_sum}) does not equal amount ({amount})"
        )


def validate_expense_fields(
    amount: float,
    payer_id: str,
    participant_ids: List[str],
    custom_split: Optional[Dict[str, float]],
    member_ids: Iterable[str]
) -> None:
    """Run every expense rule, raising on the first violation."""
    member_ids = set(member_ids)
    validate_amount(amount)
    validate_payer(payer_id, member_ids)
    validate_participants(participant_ids, member_ids)
    validate_custom_split(amount, participant_ids, custom_split)


def normalize_category_label(label: str, existing: Iterable[str]) -> str:
    """
    Validate a new category label and return it trimmed.

    Labels must be non-empty and unique ignoring case.
    """
    cleaned = (label or "").strip()
    if not cleaned:
        raise ExpenseValidationError("Category label cannot be empty")
    if "." in cleaned or cleaned.startswith("$"):
        raise ExpenseValidationError("Category label cannot contain '.' or start with '$'")
    if cleaned.casefold() in {name.casefold() for name in existing}:
        raise ExpenseValidationError(f"Category '{cleaned}' already exists")
    return cleaned
