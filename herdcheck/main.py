from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query

from .config import ValidationRules, get_settings
from .logging import get_logger, setup_logging
from .schemas import Coordinates, DistanceRequest, ValidationResult
from .services.clock import SYSTEM_CLOCK, Clock
from .services.fields import (
    validate_coordinates,
    validate_date_range,
    validate_file_upload,
    validate_pagination_params,
    validate_record_id,
)
from .services.helpers import calculate_distance, calculate_pagination
from .services.records import (
    validate_bulk_operation,
    validate_cattle,
    validate_event,
    validate_location,
    validate_user,
)

settings = get_settings()
setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = get_logger(__name__)

app = FastAPI(title="Herd Record Validation", version=settings.APP_VERSION)


def get_rules() -> ValidationRules:
    return get_settings().rules()


def get_clock() -> Clock:
    return SYSTEM_CLOCK


def respond(record: str, result: ValidationResult) -> Dict[str, Any]:
    """200 with the result when valid, 400 with the result as detail otherwise."""
    if result.warnings:
        logger.debug("Record has warnings", record=record, warnings=len(result.warnings))
    if not result.is_valid:
        logger.info("Record rejected", record=record, errors=len(result.errors))
        raise HTTPException(status_code=400, detail=result.to_dict())
    return result.to_dict()


@app.get("/")
def root():
    return {"service": settings.APP_NAME, "docs": "/docs", "health": "/health"}


@app.get("/health")
def health():
    return {"ok": True}


# ---------------------------
# Records
# ---------------------------
@app.post("/validate/cattle")
def check_cattle(
    payload: Dict[str, Any] = Body(...),
    rules: ValidationRules = Depends(get_rules),
    clock: Clock = Depends(get_clock),
):
    return respond("cattle", validate_cattle(payload, rules=rules, clock=clock))


@app.post("/validate/cattle/bulk")
def check_bulk_operation(
    payload: Dict[str, Any] = Body(...),
    rules: ValidationRules = Depends(get_rules),
):
    return respond("bulk", validate_bulk_operation(payload, rules=rules))


@app.post("/validate/events")
def check_event(
    payload: Dict[str, Any] = Body(...),
    rules: ValidationRules = Depends(get_rules),
    clock: Clock = Depends(get_clock),
):
    return respond("event", validate_event(payload, rules=rules, clock=clock))


@app.post("/validate/users")
def check_user(
    payload: Dict[str, Any] = Body(...),
    rules: ValidationRules = Depends(get_rules),
):
    return respond("user", validate_user(payload, rules=rules))


@app.post("/validate/locations")
def check_location(
    payload: Dict[str, Any] = Body(...),
    rules: ValidationRules = Depends(get_rules),
    clock: Clock = Depends(get_clock),
):
    return respond("location", validate_location(payload, rules=rules, clock=clock))


# ---------------------------
# Uploads + query params
# ---------------------------
@app.post("/validate/files")
def check_file(
    payload: Dict[str, Any] = Body(...),
    file_type: Literal["image", "document"] = Query(default="image"),
    rules: ValidationRules = Depends(get_rules),
):
    return respond("file", validate_file_upload(payload, file_type, rules=rules))


@app.get("/validate/date-range")
def check_date_range(
    start_date: str = Query(...),
    end_date: str = Query(...),
    rules: ValidationRules = Depends(get_rules),
):
    return respond("date_range", validate_date_range(start_date, end_date, rules=rules))


@app.get("/validate/ids/{record_id}")
def check_record_id(record_id: str):
    return respond("id", validate_record_id(record_id, name="record_id"))


@app.get("/pagination")
def pagination(
    total: int = Query(..., ge=0),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    rules: ValidationRules = Depends(get_rules),
):
    respond("pagination", validate_pagination_params(page, limit, rules=rules))
    info = calculate_pagination(
        total,
        int(page) if page is not None else None,
        int(limit) if limit is not None else None,
        rules=rules,
    )
    return info.model_dump(by_alias=True)


# ---------------------------
# Distance
# ---------------------------
@app.post("/distance")
def distance(payload: DistanceRequest, rules: ValidationRules = Depends(get_rules)):
    for point in (payload.origin, payload.destination):
        respond(
            "coordinates",
            validate_coordinates(point.get("latitude"), point.get("longitude"), rules=rules),
        )

    result = calculate_distance(
        Coordinates(**payload.origin),
        Coordinates(**payload.destination),
        unit=payload.unit,
    )
    return result.model_dump()
