"""Error hierarchy for the Modelo 210 engine.

Every failure is synchronous and typed: the engine never falls back to a
wrong number. Subclasses carry the HTTP status and an error code so the API
layer can translate them without string matching.
"""

from typing import Any


class Modelo210Error(ValueError):
    """Base class for all engine errors."""

    error_code: str = "MODELO210_ERROR"
    status_code: int = 500

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class CalculationError(Modelo210Error):
    """A calculation could not be completed from the given inputs."""

    error_code = "CALCULATION_ERROR"
    status_code = 400


class InvalidInputError(CalculationError):
    """Missing, malformed or out-of-range input value."""

    error_code = "INVALID_INPUT"


class DataConsistencyError(CalculationError):
    """Source records contradict each other; fix them upstream."""

    error_code = "DATA_INCONSISTENT"


class OverlappingContractsError(DataConsistencyError):
    """Two or more non-cancelled rental contracts share days."""

    error_code = "OVERLAPPING_CONTRACTS"

    def __init__(self, message: str, overlaps: list[tuple[Any, Any]]) -> None:
        super().__init__(
            message,
            context={
                "overlaps": [
                    {"contract_1": a.contract_id, "contract_2": b.contract_id}
                    for a, b in overlaps
                ]
            },
        )
        self.overlaps = overlaps


class PreconditionError(CalculationError):
    """A prior calculation step has not been run yet."""

    error_code = "PRECONDITION_FAILED"
