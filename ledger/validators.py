"""
Business-rule validators.

Field limits are declared on the schemas and enforced by pydantic;
``messages_from_errors`` phrases its failures in the same words the rule
functions here use. Validators never raise for bad input. Field rules
return a list of messages; the composite ``validate_*`` functions collect
them into a ``ValidationResult`` so an adapter can report every problem
at once.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sized

from ledger.config import Settings, settings as default_settings
from ledger.exceptions import LedgerValidationError
from ledger.models.entry_type import EntryType
from ledger.normalize import parse_amount, utc_today
from ledger.schemas.category import CategoryCreate
from ledger.schemas.transaction import TransactionCreate


def _field_limit(model, field_name: str, constraint: str):
    """Read a declared constraint such as ``max_length`` off a schema field."""
    for item in model.model_fields[field_name].metadata:
        value = getattr(item, constraint, None)
        if value is not None:
            return value
    raise LookupError(f"{model.__name__}.{field_name} declares no {constraint}")


USER_ID_MAX_LENGTH = _field_limit(CategoryCreate, "user_id", "max_length")
NAME_MAX_LENGTH = _field_limit(CategoryCreate, "name", "max_length")
DESCRIPTION_MAX_LENGTH = _field_limit(TransactionCreate, "description", "max_length")
AMOUNT_MAX_PLACES = _field_limit(TransactionCreate, "amount", "decimal_places")
AMOUNT_UPPER_BOUND = Decimal(10) ** (
    _field_limit(TransactionCreate, "amount", "max_digits") - AMOUNT_MAX_PLACES
)
TREND_MAX_MONTHS = 24

# Leading ``loc`` entries FastAPI adds for the part of the request
_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}


def _error_field(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc if isinstance(p, str) and p not in _REQUEST_PARTS]
    return ".".join(parts) or "input"


def messages_from_errors(errors: Iterable[dict]) -> List[str]:
    """Turn pydantic ``errors()`` entries into ledger validation messages."""
    messages = []
    for error in errors:
        name = _error_field(error.get("loc", ()))
        kind = error.get("type")
        ctx = error.get("ctx") or {}
        if kind in ("missing", "string_too_short"):
            messages.append(f"{name} is required")
        elif kind == "string_too_long":
            messages.append(f"{name} must be at most {ctx['max_length']} characters")
        elif kind == "greater_than" and ctx.get("gt") == 0:
            messages.append(f"{name} must be positive")
        elif kind == "decimal_parsing":
            messages.append(f"{name} must be a number")
        elif kind == "decimal_max_places":
            messages.append(f"{name} must have at most {ctx['decimal_places']} decimal places")
        elif kind == "decimal_whole_digits":
            messages.append(f"{name} must be less than {Decimal(10) ** ctx['whole_digits']}")
        elif kind == "decimal_max_digits":
            messages.append(f"{name} must have at most {ctx['max_digits']} digits")
        elif kind == "enum":
            messages.append(f"{name} must be one of: {ctx['expected']}")
        elif kind == "value_error" and "error" in ctx:
            messages.append(f"{name}: {ctx['error']}")
        else:
            messages.append(f"{name}: {error.get('msg')}")
    return messages


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def extend(self, errors: Iterable[str]) -> "ValidationResult":
        self.errors.extend(errors)
        return self

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise LedgerValidationError(self.errors)


def validate_name(value: Optional[str], field_name: str = "name",
                  max_length: int = NAME_MAX_LENGTH) -> List[str]:
    if value is None or not str(value).strip():
        return [f"{field_name} is required"]
    if len(value) > max_length:
        return [f"{field_name} must be at most {max_length} characters"]
    return []


def validate_description(value: Optional[str],
                         max_length: int = DESCRIPTION_MAX_LENGTH) -> List[str]:
    if value is None:
        return []
    if len(value) > max_length:
        return [f"description must be at most {max_length} characters"]
    return []


def validate_amount(value: Any) -> List[str]:
    if value is None or value == "":
        return ["amount is required"]
    try:
        amount = parse_amount(value)
    except ValueError:
        return ["amount must be a number"]
    if amount <= 0:
        return ["amount must be positive"]
    if amount >= AMOUNT_UPPER_BOUND:
        return [f"amount must be less than {AMOUNT_UPPER_BOUND}"]
    if amount.as_tuple().exponent < -AMOUNT_MAX_PLACES:
        return [f"amount must have at most {AMOUNT_MAX_PLACES} decimal places"]
    return []


def validate_entry_type(value: Any, field_name: str = "type") -> List[str]:
    try:
        EntryType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in EntryType)
        return [f"{field_name} must be one of: {allowed}"]
    return []


def validate_range(value: Optional[int], field_name: str,
                   minimum: Optional[int] = None,
                   maximum: Optional[int] = None) -> List[str]:
    """Bounds check for integer inputs such as limits, capacities and months."""
    if value is None:
        return []
    if minimum is not None and value < minimum:
        return [f"{field_name} must be at least {minimum}"]
    if maximum is not None and value > maximum:
        return [f"{field_name} must be at most {maximum}"]
    return []


def validate_date_range(start: Optional[date], end: Optional[date],
                        reject_past_start: bool = False,
                        today: Optional[date] = None) -> List[str]:
    errors = []
    if start is not None and end is not None and end < start:
        errors.append("endDate must be on or after startDate")
    if reject_past_start and start is not None:
        if start < (today or utc_today()):
            errors.append("startDate must not be in the past")
    return errors


def validate_collection_size(items: Optional[Sized], field_name: str,
                             max_items: int, min_items: int = 0) -> List[str]:
    count = len(items) if items is not None else 0
    if count < min_items:
        return [f"{field_name} must contain at least {min_items} item(s)"]
    if count > max_items:
        return [f"{field_name} must contain at most {max_items} items"]
    return []


def _require_fields_set(changes, nullable: Iterable[str]) -> List[str]:
    data = changes.model_dump(exclude_unset=True)
    if not data:
        return ["No updates provided"]
    return [
        f"{name} cannot be null"
        for name, value in data.items()
        if value is None and name not in nullable
    ]


def validate_user(user_id: Optional[str]) -> ValidationResult:
    return ValidationResult(validate_name(user_id, "userId", max_length=USER_ID_MAX_LENGTH))


def validate_category_create(data) -> ValidationResult:
    result = ValidationResult()
    result.extend(validate_name(data.user_id, "userId", max_length=USER_ID_MAX_LENGTH))
    result.extend(validate_name(data.name))
    result.extend(validate_entry_type(data.type))
    return result


def validate_category_update(changes) -> ValidationResult:
    result = ValidationResult(_require_fields_set(changes, nullable=()))
    data = changes.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        result.extend(validate_name(data["name"]))
    if data.get("type") is not None:
        result.extend(validate_entry_type(data["type"]))
    return result


def validate_transaction_create(data) -> ValidationResult:
    result = ValidationResult()
    result.extend(validate_name(data.user_id, "userId", max_length=USER_ID_MAX_LENGTH))
    result.extend(validate_amount(data.amount))
    result.extend(validate_entry_type(data.type))
    if data.date is None:
        result.errors.append("date is required")
    result.extend(validate_description(data.description))
    return result


def validate_transaction_update(changes) -> ValidationResult:
    result = ValidationResult(
        _require_fields_set(changes, nullable=("category_id", "description"))
    )
    data = changes.model_dump(exclude_unset=True)
    if data.get("amount") is not None:
        result.extend(validate_amount(data["amount"]))
    if data.get("type") is not None:
        result.extend(validate_entry_type(data["type"]))
    if data.get("description") is not None:
        result.extend(validate_description(data["description"]))
    return result


def validate_transaction_filter(filters, config: Settings = default_settings) -> ValidationResult:
    result = ValidationResult()
    result.extend(validate_name(filters.user_id, "userId", max_length=USER_ID_MAX_LENGTH))
    result.extend(validate_date_range(filters.start_date, filters.end_date))
    result.extend(validate_range(filters.limit, "limit", 1, config.max_list_limit))
    result.extend(validate_range(filters.offset, "offset", 0))
    return result


def validate_report_range(user_id: str, start: Optional[date], end: Optional[date],
                          config: Settings = default_settings,
                          today: Optional[date] = None) -> ValidationResult:
    result = ValidationResult()
    result.extend(validate_name(user_id, "userId", max_length=USER_ID_MAX_LENGTH))
    if start is None:
        result.errors.append("startDate is required")
    if end is None:
        result.errors.append("endDate is required")
    result.extend(validate_date_range(
        start, end,
        reject_past_start=config.reject_past_start_dates,
        today=today,
    ))
    return result


def validate_trend_months(months: int) -> ValidationResult:
    return ValidationResult(validate_range(months, "months", 1, TREND_MAX_MONTHS))


def validate_bulk_categorize(request, config: Settings = default_settings) -> ValidationResult:
    result = ValidationResult()
    result.extend(validate_name(request.user_id, "userId", max_length=USER_ID_MAX_LENGTH))
    result.extend(validate_collection_size(
        request.transaction_ids, "transactionIds",
        max_items=config.max_bulk_transaction_ids, min_items=1,
    ))
    return result
