from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ANIMAL_TYPES = ("cow", "bull", "calf", "heifer", "steer", "ox")

BREEDS = (
    "holstein", "angus", "hereford", "charolais", "simmental", "brahman",
    "limousin", "shorthorn", "jersey", "guernsey", "brown_swiss", "ayrshire",
    "santa_gertrudis", "brangus", "beefmaster", "gelbvieh", "corriente",
    "criollo", "nelore", "gyr", "indo_brasil", "mixed", "other",
)

HEALTH_STATUSES = ("healthy", "sick", "recovering", "quarantine", "deceased", "unknown")

EVENT_TYPES = (
    "vaccination", "illness", "treatment", "pregnancy_check", "birth",
    "weaning", "breeding", "injury", "surgery", "deworming", "hoof_trimming",
    "weight_check", "body_condition_score", "location_update", "transfer",
    "death", "sale", "purchase", "other",
)

VACCINE_TYPES = (
    "ibr", "bvd", "pi3", "brsv", "clostridium", "blackleg", "anthrax",
    "pasteurella", "mannheimia", "brucellosis", "leptospirosis",
    "campylobacter", "trichomonas", "rabies", "foot_and_mouth", "lumpy_skin",
    "hemorrhagic_septicemia", "five_way", "seven_way", "nine_way", "other",
)

USER_ROLES = ("admin", "veterinarian", "farm_manager", "worker", "viewer")
USER_STATUSES = ("active", "inactive", "suspended", "pending")
ILLNESS_SEVERITIES = ("mild", "moderate", "severe", "critical")
TREATMENT_STATUSES = ("planned", "in_progress", "completed", "cancelled", "overdue")
BULK_OPERATIONS = ("update", "delete", "change_health_status")

ALLOWED_MIME_TYPES = {
    "image": ("image/jpeg", "image/jpg", "image/png", "image/webp"),
    "document": ("application/pdf", "text/plain", "application/msword"),
}

MIME_EXTENSIONS = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/webp": ("webp",),
    "application/pdf": ("pdf",),
    "text/plain": ("txt",),
    "application/msword": ("doc",),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ("docx",),
}


class ValidationRules(BaseModel):
    """Bounds and closed value sets consulted by every validator.

    Frozen so a single instance can be shared between requests. Build a new
    one (``ValidationRules(weight_max=900)`` or ``rules.model_copy(update=...)``)
    to vary a bound.
    """

    model_config = ConfigDict(frozen=True)

    # Cattle
    tag_min_length: int = 3
    tag_max_length: int = 20
    cattle_name_max_length: int = 50
    weight_min: float = 1
    weight_max: float = 2000  # kg
    weight_warn_below: float = 20
    weight_warn_above: float = 1200

    # Users
    username_min_length: int = 3
    username_max_length: int = 30
    reserved_usernames: Tuple[str, ...] = (
        "admin", "root", "administrator", "system", "api", "test", "null", "undefined",
    )
    password_min_length: int = 6
    password_max_length: int = 100
    password_min_classes: int = 3
    weak_password_patterns: Tuple[str, ...] = ("123456", "password", "qwerty", "abc123", "admin")
    password_max_repeat: int = 3
    email_max_length: int = 100
    person_name_max_length: int = 50
    phone_min_digits: int = 10
    phone_max_digits: int = 15

    # Events
    event_description_max_length: int = 500
    event_notes_max_length: int = 1000
    cost_warn_above: float = 1_000_000
    dosage_warn_above: float = 100

    # Geolocation
    min_latitude: float = -90
    max_latitude: float = 90
    min_longitude: float = -180
    max_longitude: float = 180
    max_accuracy_m: float = 10_000
    location_max_age_minutes: int = 60

    # Temporal windows
    max_animal_age_years: int = 25
    young_animal_warn_years: int = 1
    old_animal_warn_years: int = 10
    event_max_past_years: int = 2
    event_max_future_months: int = 6
    event_warn_future_days: int = 7
    event_warn_past_months: int = 6
    future_date_max_years: int = 5
    date_range_max_days: int = 730

    # Files
    max_file_size: int = 5 * 1024 * 1024
    filename_max_length: int = 255

    # Pagination
    default_page: int = 1
    default_limit: int = 10
    min_limit: int = 1
    max_limit: int = 100

    # Closed value sets
    animal_types: Tuple[str, ...] = ANIMAL_TYPES
    breeds: Tuple[str, ...] = BREEDS
    health_statuses: Tuple[str, ...] = HEALTH_STATUSES
    event_types: Tuple[str, ...] = EVENT_TYPES
    vaccine_types: Tuple[str, ...] = VACCINE_TYPES
    user_roles: Tuple[str, ...] = USER_ROLES
    user_statuses: Tuple[str, ...] = USER_STATUSES
    illness_severities: Tuple[str, ...] = ILLNESS_SEVERITIES
    treatment_statuses: Tuple[str, ...] = TREATMENT_STATUSES
    bulk_operations: Tuple[str, ...] = BULK_OPERATIONS
    allowed_mime_types: Dict[str, Tuple[str, ...]] = Field(default_factory=lambda: dict(ALLOWED_MIME_TYPES))
    mime_extensions: Dict[str, Tuple[str, ...]] = Field(default_factory=lambda: dict(MIME_EXTENSIONS))


DEFAULT_RULES = ValidationRules()


class Settings(BaseSettings):
    """Application settings loaded from environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=True)

    APP_NAME: str = Field(default="herdcheck")
    APP_VERSION: str = Field(default="0.5.0")

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")

    # Optional overrides for the validation bounds
    MAX_FILE_SIZE: Optional[int] = Field(default=None)
    PAGINATION_MAX_LIMIT: Optional[int] = Field(default=None)

    def rules(self) -> ValidationRules:
        update = {}
        if self.MAX_FILE_SIZE is not None:
            update["max_file_size"] = self.MAX_FILE_SIZE
        if self.PAGINATION_MAX_LIMIT is not None:
            update["max_limit"] = self.PAGINATION_MAX_LIMIT
        return DEFAULT_RULES.model_copy(update=update) if update else DEFAULT_RULES


@lru_cache()
def get_settings() -> Settings:
    return Settings()
