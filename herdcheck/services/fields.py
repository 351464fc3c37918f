from __future__ import annotations

import math
import re
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from dateutil.relativedelta import relativedelta

from ..config import DEFAULT_RULES, ValidationRules
from ..schemas import ValidationResult
from .candidates import FileCandidate
from .clock import parse_instant, resolve_now
from .outcome import Outcome

TAG_PATTERN = re.compile(r"[A-Z0-9_-]+")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
USERNAME_PATTERN = re.compile(r"[a-z0-9_-]+")
PHONE_SEPARATORS = re.compile(r"[ \-()+]")
DIGITS = re.compile(r"[0-9]+")
UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)

PASSWORD_CLASSES = (
    ("lowercase letters", re.compile(r"[a-z]")),
    ("uppercase letters", re.compile(r"[A-Z]")),
    ("numbers", re.compile(r"[0-9]")),
    ("special characters", re.compile(r"[^a-zA-Z0-9]")),
)


def is_number(value: Any) -> bool:
    # ints never go through float(), so arbitrarily large ones stay comparable
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def fmt_number(value: float) -> str:
    """1.0 -> '1', 2.5 -> '2.5', 1000000 -> '1000000'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


# ---------------------------
# Identity fields
# ---------------------------
def validate_tag(tag: Any, *, rules: ValidationRules = DEFAULT_RULES) -> ValidationResult:
    out = Outcome()
    if not isinstance(tag, str) or not tag:
        out.error("Tag is required")
        return out.result()

    clean = tag.strip().upper()
    if len(clean) < rules.tag_min_length:
        out.error(f"Tag must be at least {rules.tag_min_length} characters")
    if len(clean) > rules.tag_max_length:
        out.error(f"Tag cannot exceed {rules.tag_max_length} characters")
    if not TAG_PATTERN.fullmatch(clean):
        out.error("Tag may only contain letters, numbers, hyphens and underscores")
    if not re.search(r"[A-Z]", clean):
        out.error("Tag must contain at least one letter")
    return out.result()


def validate_weight(weight: Any, *, rules: ValidationRules = DEFAULT_RULES) -> ValidationResult:
    out = Outcome()
    if not is_number(weight):
        out.error("Weight must be a valid number")
        return out.result()

    if weight <= 0:
        out.error("Weight must be greater than zero")
    if weight < rules.weight_min:
        out.error(f"Minimum weight is {fmt_number(rules.weight_min)} kg")
    if weight > rules.weight_max:
        out.error(f"Maximum weight is {fmt_number(rules.weight_max)} kg")

    if weight < rules.weight_warn_below:
        out.warn("Weight is very low, please verify it")
    if weight > rules.weight_warn_above:
        out.warn("Weight is very high, please verify it")
    return out.result()


# ---------------------------
# Account fields
# ---------------------------
def validate_email(email: Any, *, rules: ValidationRules = DEFAULT_RULES) -> ValidationResult:
    out = Outcome()
    if not isinstance(email, str) or not email:
        out.error("Email is required")
        return out.result()

    clean = email.strip().lower()
    if len(clean) > rules.email_max_length:
        out.error(f"Email cannot exceed {rules.email_max_length} characters")
    if not EMAIL_PATTERN.fullmatch(clean):
        out.error("Email format is invalid")
    return out.result()


def validate_username(username: Any, *, rules: ValidationRules = DEFAULT_RULES) -> ValidationResult:
    out = Outcome()
    if not isinstance(username, str) or not username:
        out.error("Username is required")
        return out.result()

    clean = username.strip().lower()
    if len(clean) < rules.username_min_length:
        out.error(f"Username must be at least {rules.username_min_length} characters")
    if len(clean) > rules.username_max_length:
        out.error(f"Username cannot exceed {rules.username_max_length} characters")
    if not USERNAME_PATTERN.fullmatch(clean):
        out.error("Username may only contain lowercase letters, numbers, hyphens and underscores")
    if clean.startswith("-") or clean.endswith("-"):
        out.error("Username cannot start or end with a hyphen")
    if clean in rules.reserved_usernames:
        out.error("This username is reserved")
    return out.result()


def validate_password(password: Any, *, rules: ValidationRules = DEFAULT_RULES) -> ValidationResult:
    """Length and character-class complexity are errors; weak patterns and
    long runs of one character are only warnings."""
    out = Outcome()
    if not isinstance(password, str) or not password:
        out.error("Password is required")
        return out.result()

    if len(password) < rules.password_min_length:
        out.error(f"Password must be at least {rules.password_min_length} characters")
    if len(password) > rules.password_max_length:
        out.error(f"Password cannot exceed {rules.password_max_length} characters")

    classes = sum(1 for _, pattern in PASSWORD_CLASSES if pattern.search(password))
    if classes < rules.password_min_classes:
        names = ", ".join(name for name, _ in PASSWORD_CLASSES)
        out.error(f"Password must contain at least {rules.password_min_classes} of: {names}")

    lowered = password.lower()
    if any(pattern.lower() in lowered for pattern in rules.weak_password_patterns):
        out.warn("Password contains common patterns that make it vulnerable")

    if re.search(r"(.)\1{%d,}" % rules.password_max_repeat, password):
        out.warn("Password contains too many repeated characters")
    return out.result()


def validate_phone(phone: Any, *, rules: ValidationRules = DEFAULT_RULES) -> ValidationResult:
    out = Outcome()
    if not isinstance(phone, str) or not phone:
        out.error("Phone number is required")
        return out.result()

    clean = PHONE_SEPARATORS.sub("", phone)
    if len(clean) < rules.phone_min_digits:
        out.error(f"Phone number must have at least {rules.phone_min_digits} digits")
    if len(clean) > rules.phone_max_digits:
        out.error(f"Phone number cannot exceed {rules.phone_max_digits} digits")
    if not DIGITS.fullmatch(clean):
        out.error("Phone number may only contain digits")
    return out.result()


# ---------------------------
# Geolocation
# ---------------------------
def validate_coordinates(
    latitude: Any,
    longitude: Any,
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()

    if not is_number(latitude):
        out.error("Latitude must be a valid number")
    elif not rules.min_latitude <= latitude <= rules.max_latitude:
        out.error(
            f"Latitude must be between {fmt_number(rules.min_latitude)} and {fmt_number(rules.max_latitude)}"
        )

    if not is_number(longitude):
        out.error("Longitude must be a valid number")
    elif not rules.min_longitude <= longitude <= rules.max_longitude:
        out.error(
            f"Longitude must be between {fmt_number(rules.min_longitude)} and {fmt_number(rules.max_longitude)}"
        )
    return out.result()


# ---------------------------
# Dates
# ---------------------------
def validate_birth_date(
    birth_date: Any,
    *,
    now: Optional[datetime] = None,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()
    now = resolve_now(now)
    try:
        born = parse_instant(birth_date)
    except TypeError:
        out.error("Birth date is invalid")
        return out.result()
    except (ValueError, OverflowError):
        out.error("Birth date format is invalid")
        return out.result()

    if born > now:
        out.error("Birth date cannot be in the future")
    if born < now - relativedelta(years=rules.max_animal_age_years):
        out.error(f"Birth date is too old (max {_plural(rules.max_animal_age_years, 'year')})")

    if born > now - relativedelta(years=rules.young_animal_warn_years):
        out.warn("Animal is very young, please verify the date")
    if born < now - relativedelta(years=rules.old_animal_warn_years):
        out.warn("Animal is of advanced age")
    return out.result()


def validate_event_date(
    event_date: Any,
    *,
    now: Optional[datetime] = None,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()
    now = resolve_now(now)
    try:
        when = parse_instant(event_date)
    except TypeError:
        out.error("Event date is invalid")
        return out.result()
    except (ValueError, OverflowError):
        out.error("Event date format is invalid")
        return out.result()

    if when > now + relativedelta(months=rules.event_max_future_months):
        out.error(
            f"Event date cannot be more than {_plural(rules.event_max_future_months, 'month')} in the future"
        )
    if when < now - relativedelta(years=rules.event_max_past_years):
        out.error(f"Event date cannot be more than {_plural(rules.event_max_past_years, 'year')} in the past")

    if when > now + timedelta(days=rules.event_warn_future_days):
        out.warn(f"Event is scheduled more than {_plural(rules.event_warn_future_days, 'day')} in the future")
    if when < now - relativedelta(months=rules.event_warn_past_months):
        out.warn(f"Event is more than {_plural(rules.event_warn_past_months, 'month')} old")
    return out.result()


def validate_future_date(
    value: Any,
    *,
    now: Optional[datetime] = None,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()
    now = resolve_now(now)
    try:
        when = parse_instant(value)
    except TypeError:
        out.error("Date is invalid")
        return out.result()
    except (ValueError, OverflowError):
        out.error("Date format is invalid")
        return out.result()

    if when <= now:
        out.error("Date must be in the future")
    if when > now + relativedelta(years=rules.future_date_max_years):
        out.error(f"Date cannot be more than {_plural(rules.future_date_max_years, 'year')} in the future")
    return out.result()


def validate_date_range(
    start_date: Any,
    end_date: Any,
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    out = Outcome()
    try:
        start = parse_instant(start_date)
        end = parse_instant(end_date)
    except (TypeError, ValueError, OverflowError):
        out.error("Dates are invalid")
        return out.result()

    if start >= end:
        out.error("Start date must be before end date")
    if end - start > timedelta(days=rules.date_range_max_days):
        out.error(f"Date range cannot exceed {rules.date_range_max_days} days")
    return out.result()


# ---------------------------
# Uploads
# ---------------------------
def validate_file_upload(
    file: Any,
    file_type: str = "image",
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    """Check upload metadata against the allow-list for ``file_type``
    ('image' or 'document')."""
    out = Outcome()
    if isinstance(file, Mapping):
        file = FileCandidate.from_record(file)
    if (
        not isinstance(file, FileCandidate)
        or not isinstance(file.original_name, str)
        or not file.original_name
        or not isinstance(file.mimetype, str)
        or not file.mimetype
        or file.size is None
    ):
        out.error("File is invalid or corrupted")
        return out.result()

    if not is_number(file.size):
        out.error("File size must be a valid number")
    elif file.size < 1:
        out.error("File is empty")
    elif file.size > rules.max_file_size:
        out.error(f"File exceeds the maximum size of {fmt_number(rules.max_file_size / 1024 / 1024)}MB")

    allowed = rules.allowed_mime_types.get(file_type)
    if allowed is None:
        out.error(f"Unknown file purpose '{file_type}'. Allowed: {', '.join(rules.allowed_mime_types)}")
    elif file.mimetype not in allowed:
        out.error(f"File type not allowed. Allowed types: {', '.join(allowed)}")

    if len(file.original_name) > rules.filename_max_length:
        out.error(f"File name cannot exceed {rules.filename_max_length} characters")

    extension = file.original_name.rsplit(".", 1)[-1].lower()
    expected = rules.mime_extensions.get(file.mimetype)
    if expected and extension and extension not in expected:
        out.error("File extension does not match its type")
    return out.result()


# ---------------------------
# Request parameters
# ---------------------------
def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"-?[0-9]+", value.strip()):
        return int(value)
    return None


def validate_pagination_params(
    page: Any = None,
    limit: Any = None,
    *,
    rules: ValidationRules = DEFAULT_RULES,
) -> ValidationResult:
    """Numeric strings are accepted since these usually come from a query string."""
    out = Outcome()
    if page is not None:
        number = _as_int(page)
        if number is None or number < 1:
            out.error("Page must be a positive integer")
    if limit is not None:
        number = _as_int(limit)
        if number is None or not rules.min_limit <= number <= rules.max_limit:
            out.error(f"Limit must be an integer between {rules.min_limit} and {rules.max_limit}")
    return out.result()


def validate_record_id(value: Any, *, name: str = "id") -> ValidationResult:
    out = Outcome()
    if value is None or value == "":
        out.error(f"Parameter {name} is required")
        return out.result()

    if isinstance(value, bool):
        text = ""
    elif isinstance(value, int):
        text = str(value)
    else:
        text = str(value).strip()

    if DIGITS.fullmatch(text):
        if int(text) < 1:
            out.error(f"Invalid {name} format")
    elif not UUID_PATTERN.fullmatch(text):
        out.error(f"Invalid {name} format")
    return out.result()
