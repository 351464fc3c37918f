from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

from ..schemas import ValidationResult


class Outcome:
    """Collects errors and warnings while a validator runs."""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def extend(self, result: ValidationResult) -> None:
        self.errors.extend(result.errors)
        if result.warnings:
            self.warnings.extend(result.warnings)

    @contextmanager
    def guard(self, label: str) -> Iterator[None]:
        # A fault inside one field's checks becomes one error for that field.
        try:
            yield
        except (TypeError, ValueError, OverflowError):
            self.error(f"{label} has an invalid format")

    def result(self) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            errors=list(self.errors),
            warnings=list(self.warnings) if self.warnings else None,
        )
