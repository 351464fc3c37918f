from __future__ import annotations

from datetime import datetime, timedelta
from functools import singledispatch
from typing import Any, Iterable, Mapping, Optional, Union

from ..config import DEFAULT_RULES, ValidationRules
from ..schemas import ValidationResult
from .candidates import (
    CattleCandidate,
    EventCandidate,
    IllnessDetails,
    LocationCandidate,
    TreatmentDetails,
    UserCandidate,
    VaccinationDetails,
)
from .clock import Clock, parse_instant, resolve_now
from .fields import (
    fmt_number,
    is_number,
    is_positive_int,
    validate_birth_date,
    validate_coordinates,
    validate_email,
    validate_event_date,
    validate_future_date,
    validate_password,
    validate_phone,
    validate_tag,
    validate_username,
    validate_weight,
)
from .outcome import Outcome


def _missing(value: Any) -> bool:
    return value is None or value == ""


def _allowed(values: Iterable[str]) -> str:
    return ", ".join(values)


def _check_required_enum(out: Outcome, value: Any, allowed: Iterable[str], label: str) -> None:
    if _missing(value):
        out.error(f"{label} is required")
    elif value not in allowed:
        out.error(f"Invalid {label.lower()}. Allowed values: {_allowed(allowed)}")


def _check_optional_enum(out: Outcome, value: Any, allowed: Iterable[str], label: str) -> None:
    if not _missing(value) and value not in allowed:
        out.error(f"Invalid {label.lower()}. Allowed values: {_allowed(allowed)}")


def _check_optional_id(out: Outcome, value: Any, label: str) -> None:
    if value is not None and not is_positive_int(value):
        out.error(f"Invalid {label}")


def _check_location_pair(out: Outcome, latitude: Any, longitude: Any, rules: ValidationRules) -> None:
    if latitude is None and longitude is None:
        return
    if latitude is None or longitude is None:
        out.error("Latitude and longitude must be provided together")
        return
    out.extend(validate_coordinates(latitude, longitude, rules=rules))


def _check_max_length(out: Outcome, value: Any, limit: int, label: str) -> None:
    if not isinstance(value, str):
        out.error(f"{label} must be text")
    elif len(value) > limit:
        out.error(f"{label} cannot exceed {limit} characters")


# ---------------------------
# Cattle
# ---------------------------
def validate_cattle(
    record: Union[Mapping[str, Any], CattleCandidate],
    *,
    rules: ValidationRules = DEFAULT_RULES,
    clock: Optional[Clock] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Validate a cattle record for create/update.

    Every field is checked; the result lists every problem found. Relative
    date checks all use the same instant, read once from ``now`` or
    ``clock``.
    """
    cattle = record if isinstance(record, CattleCandidate) else CattleCandidate.from_record(record)
    now = resolve_now(now, clock)
    out = Outcome()

    with out.guard("Tag"):
        if not isinstance(cattle.tag, str) or not cattle.tag:
            out.error("Animal tag is required")
        else:
            out.extend(validate_tag(cattle.tag, rules=rules))

    with out.guard("Animal type"):
        _check_required_enum(out, cattle.type, rules.animal_types, "Animal type")

    with out.guard("Breed"):
        _check_required_enum(out, cattle.breed, rules.breeds, "Breed")

    with out.guard("Birth date"):
        if _missing(cattle.birth_date):
            out.error("Birth date is required")
        else:
            out.extend(validate_birth_date(cattle.birth_date, now=now, rules=rules))

    with out.guard("Name"):
        if cattle.name is not None:
            _check_max_length(out, cattle.name, rules.cattle_name_max_length, "Name")
            if isinstance(cattle.name, str) and not cattle.name.strip():
                out.warn("Name is empty")

    with out.guard("Weight"):
        if cattle.weight is not None:
            out.extend(validate_weight(cattle.weight, rules=rules))

    with out.guard("Health status"):
        _check_optional_enum(out, cattle.health_status, rules.health_statuses, "Health status")

    with out.guard("Location"):
        _check_location_pair(out, cattle.latitude, cattle.longitude, rules)

    _check_optional_id(out, cattle.mother_id, "mother id")
    _check_optional_id(out, cattle.father_id, "father id")
    _check_optional_id(out, cattle.farm_id, "farm id")

    return out.result()


# ---------------------------
# Events
# ---------------------------
@singledispatch
def validate_event_details(details: Any, *, now: datetime, rules: ValidationRules) -> ValidationResult:
    raise TypeError(f"unsupported event details: {type(details).__name__}")


@validate_event_details.register(type(None))
def _validate_no_details(details: None, *, now: datetime, rules: ValidationRules) -> ValidationResult:
    return ValidationResult(is_valid=True)


@validate_event_details.register(VaccinationDetails)
def validate_vaccination_details(
    details: VaccinationDetails,
    *,
    now: datetime,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()

    if _missing(details.vaccine_type):
        out.error("Vaccine type is required for vaccination events")
    elif details.vaccine_type not in rules.vaccine_types:
        out.error(f"Invalid vaccine type. Allowed values: {_allowed(rules.vaccine_types)}")

    if details.dosage is not None:
        if not is_number(details.dosage):
            out.error("Dosage must be a valid number")
        elif details.dosage <= 0:
            out.error("Dosage must be greater than zero")
        elif details.dosage > rules.dosage_warn_above:
            out.warn("Dosage is very high, please verify it")

    if not _missing(details.next_due_date):
        due = validate_future_date(details.next_due_date, now=now, rules=rules)
        if not due.is_valid:
            out.error("Next due date is invalid: " + ", ".join(due.errors))

    return out.result()


@validate_event_details.register(IllnessDetails)
def validate_illness_details(
    details: IllnessDetails,
    *,
    now: datetime,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()
    _check_optional_enum(out, details.severity, rules.illness_severities, "Severity")
    return out.result()


@validate_event_details.register(TreatmentDetails)
def validate_treatment_details(
    details: TreatmentDetails,
    *,
    now: datetime,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()
    _check_optional_enum(out, details.treatment_status, rules.treatment_statuses, "Treatment status")

    if details.medications is not None:
        if not isinstance(details.medications, (list, tuple)):
            out.error("Medications must be a list")
        else:
            for index, medication in enumerate(details.medications, start=1):
                if not isinstance(medication, str) or not medication.strip():
                    out.error(f"Medication {index} is invalid")

    return out.result()


def validate_event(
    record: Union[Mapping[str, Any], EventCandidate],
    *,
    rules: ValidationRules = DEFAULT_RULES,
    clock: Optional[Clock] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Validate a health/management event, including the checks specific
    to its event type (vaccination, illness, treatment)."""
    event = record if isinstance(record, EventCandidate) else EventCandidate.from_record(record)
    now = resolve_now(now, clock)
    out = Outcome()

    if not is_positive_int(event.cattle_id):
        out.error("A valid cattle id is required")

    with out.guard("Event type"):
        _check_required_enum(out, event.event_type, rules.event_types, "Event type")

    with out.guard("Event date"):
        if _missing(event.event_date):
            out.error("Event date is required")
        else:
            out.extend(validate_event_date(event.event_date, now=now, rules=rules))

    with out.guard("Description"):
        if not isinstance(event.description, str) or not event.description:
            out.error("Event description is required")
        elif not event.description.strip():
            out.error("Description cannot be blank")
        elif len(event.description) > rules.event_description_max_length:
            out.error(f"Description cannot exceed {rules.event_description_max_length} characters")

    with out.guard("Event details"):
        out.extend(validate_event_details(event.details, now=now, rules=rules))

    _check_optional_id(out, event.veterinarian_id, "veterinarian id")

    with out.guard("Notes"):
        if event.notes is not None:
            _check_max_length(out, event.notes, rules.event_notes_max_length, "Notes")

    with out.guard("Cost"):
        if event.cost is not None:
            if not is_number(event.cost):
                out.error("Cost must be a valid number")
            elif event.cost < 0:
                out.error("Cost cannot be negative")
            elif event.cost > rules.cost_warn_above:
                out.warn("Cost is very high, please verify it")

    with out.guard("Location"):
        _check_location_pair(out, event.latitude, event.longitude, rules)

    return out.result()


# ---------------------------
# Users
# ---------------------------
def _check_person_name(out: Outcome, value: Any, label: str, rules: ValidationRules) -> None:
    if not isinstance(value, str) or not value.strip():
        out.error(f"{label} is required")
    elif len(value) > rules.person_name_max_length:
        out.error(f"{label} cannot exceed {rules.person_name_max_length} characters")


def validate_user(
    record: Union[Mapping[str, Any], UserCandidate],
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    user = record if isinstance(record, UserCandidate) else UserCandidate.from_record(record)
    out = Outcome()

    with out.guard("Username"):
        out.extend(validate_username(user.username, rules=rules))

    with out.guard("Email"):
        out.extend(validate_email(user.email, rules=rules))

    with out.guard("Password"):
        out.extend(validate_password(user.password, rules=rules))

    with out.guard("First name"):
        _check_person_name(out, user.first_name, "First name", rules)

    with out.guard("Last name"):
        _check_person_name(out, user.last_name, "Last name", rules)

    with out.guard("Role"):
        _check_required_enum(out, user.role, rules.user_roles, "Role")

    with out.guard("Phone"):
        if not _missing(user.phone):
            out.extend(validate_phone(user.phone, rules=rules))

    with out.guard("Status"):
        _check_optional_enum(out, user.status, rules.user_statuses, "Status")

    return out.result()


# ---------------------------
# Location fixes
# ---------------------------
def _duration_label(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"


def validate_location(
    record: Union[Mapping[str, Any], LocationCandidate],
    *,
    rules: ValidationRules = DEFAULT_RULES,
    clock: Optional[Clock] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Validate a GPS fix. Without both coordinates nothing else is checked."""
    fix = record if isinstance(record, LocationCandidate) else LocationCandidate.from_record(record)
    now = resolve_now(now, clock)
    out = Outcome()

    if fix.latitude is None or fix.longitude is None:
        out.error("Latitude and longitude are required")
        return out.result()

    with out.guard("Coordinates"):
        out.extend(validate_coordinates(fix.latitude, fix.longitude, rules=rules))

    with out.guard("Accuracy"):
        if fix.accuracy is not None:
            if not is_number(fix.accuracy):
                out.error("Accuracy must be a valid number")
            elif fix.accuracy < 0:
                out.error("Accuracy cannot be negative")
            elif fix.accuracy > rules.max_accuracy_m:
                out.error(f"Accuracy is too low (max {fmt_number(rules.max_accuracy_m)} m)")

    with out.guard("Timestamp"):
        if not _missing(fix.timestamp):
            try:
                taken = parse_instant(fix.timestamp)
            except (TypeError, ValueError, OverflowError):
                out.error("Timestamp is invalid")
            else:
                if taken > now:
                    out.error("Timestamp cannot be in the future")
                if taken < now - timedelta(minutes=rules.location_max_age_minutes):
                    out.error(f"Timestamp is too old (max {_duration_label(rules.location_max_age_minutes)})")

    return out.result()


# ---------------------------
# Bulk cattle operations
# ---------------------------
def validate_bulk_operation(
    record: Mapping[str, Any],
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    """Validate a bulk request ``{"ids": [...], "operation": ..., "data": {...}}``.

    ``update`` needs a non-empty ``data`` object; ``change_health_status``
    needs ``data.healthStatus``. ``delete`` ignores ``data``.
    """
    out = Outcome()
    ids = record.get("ids")
    operation = record.get("operation")
    data = record.get("data")

    if not isinstance(ids, (list, tuple)) or not ids:
        out.error("At least one cattle id is required")
    else:
        for index, value in enumerate(ids, start=1):
            if not is_positive_int(value):
                out.error(f"Cattle id {index} is invalid")

    with out.guard("Operation"):
        _check_required_enum(out, operation, rules.bulk_operations, "Operation")

    if operation == "update":
        if not isinstance(data, Mapping) or not data:
            out.error("Update data is required")
    elif operation == "change_health_status":
        status = data.get("healthStatus") if isinstance(data, Mapping) else None
        _check_required_enum(out, status, rules.health_statuses, "Health status")

    return out.result()
