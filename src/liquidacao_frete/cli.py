"""CLI bootstrap for liquidacao-frete."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path

import typer
from pydantic import BaseModel, Field, ValidationError

from liquidacao_frete.api.schemas.settlements import SettlementRequest
from liquidacao_frete.domain.dates import local_today
from liquidacao_frete.domain.errors import DomainError
from liquidacao_frete.domain.money import format_brl, format_money, parse_amount
from liquidacao_frete.domain.settlement_planner import plan_settlement

app = typer.Typer(help="CLI for freight settlement planning.")
INPUT_FILE_OPTION = typer.Option(..., "--input", exists=True, dir_okay=False)


class PlanInput(BaseModel):
    """JSON input for the ``plan`` command."""

    cargo: str = Field(min_length=1)
    base_value: str
    existing_descriptions: list[str] = Field(default_factory=list)
    settlement: SettlementRequest
    today: date | None = None


@dataclass(frozen=True, slots=True)
class _PostedDescription:
    description: str


@app.command("healthcheck")
def healthcheck() -> None:
    """Verify that the CLI entrypoint is available."""
    typer.echo("liquidacao-frete is ready")


@app.command("parse-amount")
def parse_amount_command(text: str) -> None:
    """Show how a typed currency value is interpreted."""
    typer.echo(format_money(parse_amount(text)))


@app.command("plan")
def plan(input_file: Path = INPUT_FILE_OPTION) -> None:
    """Plan the settlement of one route segment from a JSON input file."""
    try:
        request = PlanInput.model_validate_json(input_file.read_text(encoding="utf-8"))
    except ValidationError as exc:
        typer.echo(f"Entrada invalida em {input_file}:\n{exc}", err=True)
        raise typer.Exit(code=1) from exc
    try:
        settlement_plan = plan_settlement(
            cargo_identifier=request.cargo,
            base_value=parse_amount(request.base_value),
            existing_freight_movements=[
                _PostedDescription(description)
                for description in request.existing_descriptions
            ],
            config=request.settlement.to_configuration(),
            today=request.today or local_today(),
        )
    except DomainError as exc:
        typer.echo(f"Rejeitado ({exc.code}): {exc.message}", err=True)
        raise typer.Exit(code=1) from exc

    for movement in settlement_plan.movements:
        typer.echo(
            f"{movement.description} | {movement.category.value} | "
            f"{format_brl(movement.amount)} | {movement.due_date.isoformat()}"
        )
    typer.echo(f"Total: {format_brl(settlement_plan.total_amount)}")
    typer.echo(f"Situacao: {settlement_plan.state_after.status.value}")


def main() -> None:
    """Run the liquidacao-frete CLI application."""
    app()


if __name__ == "__main__":
    main()
