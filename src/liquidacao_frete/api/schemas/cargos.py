"""Schemas for cargo financial summary endpoint."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from liquidacao_frete.api.schemas.settlements import (
    MONEY_PATTERN,
    SettlementStateResponse,
)
from liquidacao_frete.domain.money import format_money
from liquidacao_frete.services.cargo_summary_service import CargoFinancialSummary


class SegmentSummaryResponse(BaseModel):
    index: int
    origin_city: str
    destination_city: str
    base_value: str = Field(pattern=MONEY_PATTERN)
    settlement: SettlementStateResponse


class CargoFinancialSummaryResponse(BaseModel):
    """Cargo value plus extras posted against it."""

    cargo_id: UUID
    cargo_identifier: str
    base_value: str = Field(pattern=MONEY_PATTERN)
    per_diem_total: str = Field(pattern=MONEY_PATTERN)
    other_expenses_total: str = Field(pattern=MONEY_PATTERN)
    financial_total: str = Field(pattern=MONEY_PATTERN)
    segments: list[SegmentSummaryResponse]

    @classmethod
    def from_summary(
        cls, summary: CargoFinancialSummary
    ) -> CargoFinancialSummaryResponse:
        return cls(
            cargo_id=summary.cargo_id,
            cargo_identifier=summary.cargo_identifier,
            base_value=format_money(summary.base_value),
            per_diem_total=format_money(summary.per_diem_total),
            other_expenses_total=format_money(summary.other_expenses_total),
            financial_total=format_money(summary.financial_total),
            segments=[
                SegmentSummaryResponse(
                    index=segment.index,
                    origin_city=segment.origin_city,
                    destination_city=segment.destination_city,
                    base_value=format_money(segment.base_value),
                    settlement=SettlementStateResponse.from_state(segment.state),
                )
                for segment in summary.segments
            ],
        )
