"""
CLI: serve the HTTP API, or quote a price from a JSON catalog file.

Catalog format:
    {
      "entries": [
        {"sku": "TSHIRT-01", "price_in_cents": 2500, "currency": "USD",
         "scheduled_prices": [{"price_in_cents": 2000, "effective_date": "2026-11-01T00:00:00Z"}],
         "bulk_tiers": [{"min_quantity": 10, "discount_percentage": 5}],
         "promotions": [{"name": "Autumn", "type": "SEASONAL", "discount_percentage": 10,
                         "valid_from": "2026-10-01", "valid_until": "2026-12-01", "priority": 1}]}
      ],
      "stock": {"TSHIRT-01": 42}
    }
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from pricebook.core import Settings, configure_logging, load_settings
from pricebook.ddd.domain_module import to_jsonable
from pricebook.domain import PricingError
from pricebook.pricing.application import (
    AddPromotion,
    CalculatePrice,
    CalculatedPriceDTO,
    PriceEntryUseCases,
    ScheduleBasePrice,
    SetBasePrice,
    SetBulkTiers,
)
from pricebook.pricing.domain import AvailabilityProvider
from pricebook.pricing.infrastructure import (
    InMemoryPriceEntryRepository,
    StaticAvailabilityProvider,
    StockLevelAvailabilityProvider,
)

app = typer.Typer(help="pricebook CLI: serve the pricing API or quote prices from a catalog file.")


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(1)


def _read_catalog(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        _fail(f"Cannot read catalog {path}: {exc}")
    except json.JSONDecodeError as exc:
        _fail(f"Catalog {path} is not valid JSON: {exc}")
    if not isinstance(data, dict) or not isinstance(data.get("entries", []), list):
        _fail(f"Catalog {path} must be an object with an 'entries' list")
    return data


def load_catalog(data: dict[str, Any], use_cases: PriceEntryUseCases) -> int:
    """Replay a catalog through the use cases. Returns the number of entries loaded."""
    entries = data.get("entries", [])
    for raw in entries:
        sku = raw["sku"]
        currency = raw.get("currency")
        use_cases.set_base_price(SetBasePrice(sku=sku, price_in_cents=raw["price_in_cents"], currency=currency))
        for scheduled in raw.get("scheduled_prices", []):
            use_cases.schedule_base_price(
                ScheduleBasePrice(
                    sku=sku,
                    price_in_cents=scheduled["price_in_cents"],
                    effective_date=scheduled["effective_date"],
                    currency=scheduled.get("currency", currency),
                )
            )
        if raw.get("bulk_tiers"):
            use_cases.set_bulk_tiers(SetBulkTiers(sku=sku, tiers=raw["bulk_tiers"]))
        for promotion in raw.get("promotions", []):
            use_cases.add_promotion(AddPromotion(sku=sku, **promotion))
    return len(entries)


def _availability(data: dict[str, Any], settings: Settings, level: Optional[str]) -> AvailabilityProvider:
    if level is not None:
        return StaticAvailabilityProvider(fallback=level)
    return StockLevelAvailabilityProvider(
        on_hand=data.get("stock", {}),
        low_stock_threshold=settings.low_stock_threshold,
        medium_stock_threshold=settings.medium_stock_threshold,
        fallback=settings.availability_fallback,
    )


def _cents(amount: int, currency: str) -> str:
    return f"{amount / 100:.2f} {currency}"


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: PRICEBOOK_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: PRICEBOOK_PORT)"),
) -> None:
    """Run the pricing HTTP API."""
    from pricebook.main import create_app

    settings = load_settings()
    configure_logging(settings.log_level, json=settings.log_json)
    create_app(settings).run(host=host or settings.host, port=port or settings.port)


@app.command()
def quote(
    catalog: Path = typer.Argument(..., help="JSON catalog file"),
    sku: str = typer.Argument(..., help="SKU to price"),
    quantity: Optional[int] = typer.Option(None, "--quantity", "-q", help="Purchase quantity for bulk tiers"),
    at: Optional[datetime] = typer.Option(None, "--at", help="Price at this instant (default: now, UTC)"),
    availability: Optional[str] = typer.Option(
        None, "--availability", "-a", help="Force an availability level: HIGH, MEDIUM, LOW, OUT_OF_STOCK"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Load a catalog and print the calculated price of one SKU."""
    settings = load_settings()
    configure_logging("WARNING", json=settings.log_json)
    data = _read_catalog(catalog)
    try:
        use_cases = PriceEntryUseCases(
            InMemoryPriceEntryRepository(), _availability(data, settings, availability), settings
        )
        load_catalog(data, use_cases)
        calculated = use_cases.calculate_price(CalculatePrice(sku=sku, at=at, quantity=quantity))
    except (PricingError, KeyError, TypeError) as exc:
        _fail(f"Error: {exc}")
        return

    dto = CalculatedPriceDTO.from_domain(calculated)
    if as_json:
        typer.echo(json.dumps(to_jsonable(dto), indent=2))
        return
    typer.echo(f"SKU {dto.sku}")
    typer.echo(f"  base   {_cents(dto.base_price_in_cents, dto.currency)}")
    for discount in dto.applied_discounts:
        typer.echo(
            f"  - {discount.promotion_name}: {discount.original_percentage}% -> "
            f"{discount.applied_percentage}% ({discount.reason})"
        )
    typer.echo(f"  final  {_cents(dto.final_price_in_cents, dto.currency)} (-{dto.total_discount_percentage}%)")


def main() -> None:
    """Entry point for the pricebook console command."""
    app()


if __name__ == "__main__":
    main()
