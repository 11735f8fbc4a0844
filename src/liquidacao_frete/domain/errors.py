"""Domain exceptions used across API and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


def compose_error_message(*, cause: str, action: str) -> str:
    """Build a user-facing error message with cause and corrective action."""

    return f"Cause: {cause} Action: {action}"


@dataclass(slots=True)
class DomainError(Exception):
    """Base exception for predictable domain failures."""

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class SettlementConfigurationError(DomainError):
    """Raised when a settlement attempt is missing a selection or an amount."""

    def __init__(
        self,
        message: str | None = None,
        *,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged_details = dict(details or {})
        if field_name is not None:
            merged_details["field"] = field_name
        super().__init__(
            code="SETTLEMENT_CONFIGURATION_INVALID",
            message=message
            or compose_error_message(
                cause="Settlement configuration is incomplete.",
                action="Fill in the required settlement fields and resubmit.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=merged_details,
        )


class SettlementConflictError(DomainError):
    """Raised when a freight share was already posted for the route segment."""

    def __init__(
        self,
        message: str | None = None,
        *,
        share: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged_details = dict(details or {})
        if share is not None:
            merged_details["share"] = share
        super().__init__(
            code="SETTLEMENT_CONFLICT",
            message=message
            or compose_error_message(
                cause="The route segment already has this freight share posted.",
                action="Post only the missing share or delete the movement first.",
            ),
            status_code=HTTPStatus.CONFLICT,
            details=merged_details,
        )


class CargoNotFoundError(DomainError):
    """Raised when the cargo referenced by a request does not exist."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="CARGO_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="Cargo was not found.",
                action="Check the cargo identifier and retry.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class RouteSegmentNotFoundError(DomainError):
    """Raised when the selected route segment does not belong to the cargo."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="ROUTE_SEGMENT_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="Route segment was not found for this cargo.",
                action="Select one of the cargo's route segments and retry.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class UndoActionNotFoundError(DomainError):
    """Raised when there is no pending action to undo."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="UNDO_ACTION_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="There is no recent action available to undo.",
                action="Undo is only available shortly after an action completes.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )
