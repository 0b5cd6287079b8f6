"""CLI commands for party RSVP management."""

import asyncio
from uuid import UUID

import typer

from src.config.logging import setup_logging
from src.payments.errors import PaymentError
from src.rsvps.dependencies import get_lifecycle_controller
from src.rsvps.dtos import RefundOutcome
from src.rsvps.errors import RSVPError

app = typer.Typer(help="CLI commands for party RSVP management")


def _format_cents(cents: int | None) -> str:
    if cents is None:
        return "-"
    return f"${cents / 100:.2f}"


@app.command()
def capacity():
    """Show how many spots are taken and how many remain."""
    summary = asyncio.run(get_lifecycle_controller().capacity())

    colour = typer.colors.RED if summary.sold_out else typer.colors.GREEN
    typer.secho(
        f"{summary.admitted_guests}/{summary.capacity} guests admitted "
        f"in {summary.admitted_parties} RSVPs",
        fg=colour,
    )
    typer.secho(f"  Remaining: {summary.remaining}", fg=typer.colors.BLUE)
    typer.secho(
        f"  Price per guest: {_format_cents(summary.unit_price_cents)} {summary.currency.upper()}",
        fg=typer.colors.BLUE,
    )


@app.command()
def list_rsvps(
    status: str = typer.Option(None, "--status", help="Only show RSVPs in this status"),
):
    """List all RSVPs, newest first."""
    rsvps = asyncio.run(get_lifecycle_controller().list_all())
    if status:
        rsvps = [rsvp for rsvp in rsvps if rsvp.status.value == status]

    if not rsvps:
        typer.secho("No RSVPs found", fg=typer.colors.YELLOW)
        return

    for rsvp in rsvps:
        typer.secho(f"{rsvp.id}  {rsvp.status.value}", fg=typer.colors.CYAN)
        typer.secho(f"  {rsvp.name} <{rsvp.email}> {rsvp.phone}", fg=typer.colors.BLUE)
        typer.secho(
            f"  Guests: {rsvp.guest_count}  Payment: {rsvp.payment_ref or '-'}  "
            f"Refunded: {_format_cents(rsvp.refund_amount)}",
            fg=typer.colors.BLUE,
        )


@app.command()
def refund(
    rsvp_id: str = typer.Argument(..., help="UUID of the RSVP to refund"),
    amount: float = typer.Option(None, "--amount", help="Partial refund in dollars"),
    reason: str = typer.Option(None, "--reason", help="Refund reason sent to Stripe"),
):
    """Refund an RSVP's payment in full, or a partial amount."""
    amount_cents = round(amount * 100) if amount is not None else None
    try:
        result = asyncio.run(
            get_lifecycle_controller().refund(UUID(rsvp_id), amount_cents=amount_cents, reason=reason)
        )
    except (RSVPError, PaymentError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Refund processed!", fg=typer.colors.GREEN)
    typer.secho(f"  Refund ID: {result.refund_ref}", fg=typer.colors.CYAN)
    typer.secho(f"  Amount: {_format_cents(result.amount_cents)}", fg=typer.colors.BLUE)
    typer.secho(f"  Status: {result.status}", fg=typer.colors.BLUE)


@app.command()
def delete(
    rsvp_id: str = typer.Argument(..., help="UUID of the RSVP to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete an RSVP, refunding its payment first when there is one."""
    if not yes:
        typer.confirm(f"Delete RSVP {rsvp_id} and refund its payment?", abort=True)

    try:
        result = asyncio.run(get_lifecycle_controller().delete_with_refund(UUID(rsvp_id)))
    except RSVPError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("RSVP deleted!", fg=typer.colors.GREEN)
    colour = (
        typer.colors.YELLOW
        if result.refund_status == RefundOutcome.REFUND_FAILED
        else typer.colors.BLUE
    )
    typer.secho(f"  Refund: {result.refund_status.value}", fg=colour)


if __name__ == "__main__":
    setup_logging()
    app()
