from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

# Candidates keep the raw values from the request body. Nothing is coerced
# here, so a "weight" that arrives as a string is still a string when the
# weight check sees it. A missing key and an explicit null both map to None.


@dataclass(frozen=True)
class CattleCandidate:
    tag: Any = None
    type: Any = None
    breed: Any = None
    birth_date: Any = None
    name: Any = None
    weight: Any = None
    health_status: Any = None
    latitude: Any = None
    longitude: Any = None
    mother_id: Any = None
    father_id: Any = None
    farm_id: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CattleCandidate":
        return cls(
            tag=record.get("tag"),
            type=record.get("type"),
            breed=record.get("breed"),
            birth_date=record.get("birthDate"),
            name=record.get("name"),
            weight=record.get("weight"),
            health_status=record.get("healthStatus"),
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
            mother_id=record.get("motherId"),
            father_id=record.get("fatherId"),
            farm_id=record.get("farmId"),
        )


@dataclass(frozen=True)
class VaccinationDetails:
    vaccine_type: Any = None
    dosage: Any = None
    next_due_date: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "VaccinationDetails":
        return cls(
            vaccine_type=record.get("vaccineType"),
            dosage=record.get("dosage"),
            next_due_date=record.get("nextDueDate"),
        )


@dataclass(frozen=True)
class IllnessDetails:
    severity: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "IllnessDetails":
        return cls(severity=record.get("severity"))


@dataclass(frozen=True)
class TreatmentDetails:
    treatment_status: Any = None
    medications: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TreatmentDetails":
        return cls(
            treatment_status=record.get("treatmentStatus"),
            medications=record.get("medications"),
        )


EventDetails = Union[VaccinationDetails, IllnessDetails, TreatmentDetails]

DETAIL_PARSERS: Dict[str, Callable[[Mapping[str, Any]], EventDetails]] = {
    "vaccination": VaccinationDetails.from_record,
    "illness": IllnessDetails.from_record,
    "treatment": TreatmentDetails.from_record,
}


@dataclass(frozen=True)
class EventCandidate:
    cattle_id: Any = None
    event_type: Any = None
    event_date: Any = None
    description: Any = None
    veterinarian_id: Any = None
    notes: Any = None
    cost: Any = None
    latitude: Any = None
    longitude: Any = None
    # None for event types without a type-specific payload
    details: Optional[EventDetails] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EventCandidate":
        event_type = record.get("eventType")
        parse_details = DETAIL_PARSERS.get(event_type) if isinstance(event_type, str) else None
        return cls(
            cattle_id=record.get("cattleId"),
            event_type=event_type,
            event_date=record.get("eventDate"),
            description=record.get("description"),
            veterinarian_id=record.get("veterinarianId"),
            notes=record.get("notes"),
            cost=record.get("cost"),
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
            details=parse_details(record) if parse_details else None,
        )


@dataclass(frozen=True)
class UserCandidate:
    username: Any = None
    email: Any = None
    password: Any = None
    first_name: Any = None
    last_name: Any = None
    role: Any = None
    phone: Any = None
    status: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserCandidate":
        return cls(
            username=record.get("username"),
            email=record.get("email"),
            password=record.get("password"),
            first_name=record.get("firstName"),
            last_name=record.get("lastName"),
            role=record.get("role"),
            phone=record.get("phone"),
            status=record.get("status"),
        )


@dataclass(frozen=True)
class LocationCandidate:
    latitude: Any = None
    longitude: Any = None
    accuracy: Any = None
    timestamp: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "LocationCandidate":
        return cls(
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
            accuracy=record.get("accuracy"),
            timestamp=record.get("timestamp"),
        )


@dataclass(frozen=True)
class FileCandidate:
    original_name: Any = None
    mimetype: Any = None
    size: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "FileCandidate":
        return cls(
            original_name=record.get("originalName"),
            mimetype=record.get("mimetype"),
            size=record.get("size"),
        )
