"""Render fetch and conversion results as a plain table or JSON."""
import json
import sys
from collections.abc import Sequence
from decimal import Decimal
from typing import TextIO

from pydantic import BaseModel

from cryptoprice.providers.core import PriceProviderABC
from cryptoprice.schemas import ConversionResult, FetchResult


def to_json(items: Sequence[BaseModel]) -> str:
    """JSON list of models; decimals are strings so no precision is lost."""
    return json.dumps([item.model_dump(mode="json") for item in items], indent=2, default=str)


def print_json(items: Sequence[BaseModel], out: TextIO | None = None) -> None:
    print(to_json(items), file=out or sys.stdout)


def format_price(value: Decimal) -> str:
    """Thousands separators, 2 decimals for large prices, more for small ones."""
    if value >= 1:
        return f"{value:,.2f}"
    if value == 0:
        return "0"
    return f"{value:.8f}".rstrip("0").rstrip(".")


def format_change(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"{value:+.2f}%"


def format_market_cap(value: Decimal | None) -> str:
    if value is None:
        return "-"
    for unit, size in (("T", Decimal("1e12")), ("B", Decimal("1e9")), ("M", Decimal("1e6"))):
        if value >= size:
            return f"{value / size:,.2f}{unit}"
    return f"{value:,.0f}"


def _render(headers: list[str], rows: list[list[str]]) -> str:
    widths = [max(len(h), *(len(r[i]) for r in rows)) if rows else len(h) for i, h in enumerate(headers)]
    line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    lines = [line, "  ".join("-" * w for w in widths)]
    lines += ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)) for row in rows]
    return "\n".join(line.rstrip() for line in lines)


def quotes_table(results: Sequence[FetchResult]) -> str:
    """Table with one row per requested symbol; failed symbols show their error."""
    headers = ["SYMBOL", "NAME", "PRICE", "24H", "MARKET CAP", "PROVIDER"]
    rows: list[list[str]] = []
    for result in results:
        quote = result.quote
        if quote is None:
            rows.append([result.symbol, f"error: {result.error}", "", "", "", ""])
            continue
        rows.append(
            [
                quote.symbol,
                quote.name or "",
                f"{format_price(quote.price)} {quote.currency}",
                format_change(quote.change_pct),
                format_market_cap(quote.market_cap),
                quote.provider.value,
            ]
        )
    return _render(headers, rows)


def conversions_table(results: Sequence[ConversionResult]) -> str:
    headers = ["FROM", "TO", "AMOUNT", "RATE", "PROVIDER"]
    rows: list[list[str]] = []
    for result in results:
        conv = result.conversion
        if conv is None:
            rows.append(["", result.target, f"error: {result.error}", "", ""])
            continue
        rows.append(
            [
                f"{format_price(conv.from_amount)} {conv.from_currency}",
                f"{conv.to_symbol} ({conv.to_name})",
                format_price(conv.to_amount),
                f"{format_price(conv.rate)} {conv.from_currency}",
                conv.provider,
            ]
        )
    return _render(headers, rows)


def providers_table(providers: Sequence[PriceProviderABC]) -> str:
    rows = [
        [p.id.value, p.display_name, "yes" if p.requires_credentials else "no"]
        for p in providers
    ]
    return _render(["ID", "NAME", "API KEY"], rows)
