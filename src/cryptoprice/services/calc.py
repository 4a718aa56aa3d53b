"""Calc mode: convert a fiat amount into coins and other fiat currencies."""
import asyncio
import logging
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict

from cryptoprice.currencies import fiat_name, is_known_fiat
from cryptoprice.providers.core import (PROVIDER_EXCEPTIONS, ConfigError,
                                        ProviderErrorMapper)
from cryptoprice.providers.core.utils import dedupe, normalize_symbol
from cryptoprice.providers.fiat import FrankfurterProvider
from cryptoprice.schemas import (Conversion, ConversionResult, ErrorKind,
                                 FetchError)
from cryptoprice.services.resolver import ProviderSelection, QuoteResolver

logger = logging.getLogger(__name__)


class FiatAmount(BaseModel):
    """A fiat amount parsed from user input, e.g. '3.5EUR'."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: str


def parse_fiat_amount(text: str) -> FiatAmount | None:
    """Parse '<number><fiat code>' (e.g. '3.5EUR', '100usd').

    Returns None when the input is not an amount, so callers fall back to a
    plain price lookup. Tokens like '1inch' or '3btc' are not amounts because
    their suffix is not a fiat code.
    """
    text = text.strip()
    alpha_start = next((i for i, ch in enumerate(text) if ch.isalpha()), None)
    if not alpha_start:
        return None
    number, code = text[:alpha_start], text[alpha_start:].upper()
    if not is_known_fiat(code):
        return None
    try:
        amount = Decimal(number)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return FiatAmount(amount=amount, currency=code)


class ConversionService:
    """Converts a FiatAmount into each target, fiat and crypto legs concurrently."""

    def __init__(
        self,
        resolver: QuoteResolver,
        fiat_provider: FrankfurterProvider,
    ) -> None:
        self._resolver = resolver
        self._fiat = fiat_provider
        self._fiat_errors = ProviderErrorMapper(api_name=fiat_provider.display_name)

    async def convert(
        self,
        amount: FiatAmount,
        targets: list[str],
        provider_ids: ProviderSelection,
        *,
        fallback: bool = False,
    ) -> list[ConversionResult]:
        """One ConversionResult per distinct target, in the order given.

        Raises:
            ConfigError: no targets, blank target, or invalid provider choice.
        """
        try:
            wanted = dedupe(normalize_symbol(t) for t in targets)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if not wanted:
            raise ConfigError(
                "calc mode requires at least one target coin -- usage: cryptoprice 3.5EUR xmr"
            )
        fiat_targets = [t for t in wanted if is_known_fiat(t)]
        crypto_targets = [t for t in wanted if not is_known_fiat(t)]
        if crypto_targets:
            # Fail on a bad provider choice before any request goes out.
            self._resolver.select(provider_ids, fallback=fallback)

        logger.info(
            "Converting %s %s into fiat=%s crypto=%s",
            amount.amount,
            amount.currency,
            fiat_targets,
            crypto_targets,
        )
        fiat_results, crypto_results = await asyncio.gather(
            self._convert_fiat(amount, fiat_targets),
            self._convert_crypto(amount, crypto_targets, provider_ids, fallback),
        )
        by_target = fiat_results | crypto_results
        return [by_target[t] for t in wanted]

    async def _convert_fiat(
        self, amount: FiatAmount, targets: list[str]
    ) -> dict[str, ConversionResult]:
        if not targets:
            return {}
        try:
            rates = await self._fiat.get_rates(amount.currency, targets)
        except PROVIDER_EXCEPTIONS as exc:
            logger.warning("Fiat rate lookup failed: %r", exc)
            error = self._fiat_errors.to_fetch_error(exc)
            return {t: ConversionResult(target=t, error=error) for t in targets}

        out: dict[str, ConversionResult] = {}
        for target in targets:
            rate = rates.get(target)
            if rate is None or rate <= 0:
                out[target] = ConversionResult(
                    target=target,
                    error=FetchError(
                        kind=ErrorKind.UNKNOWN_SYMBOL,
                        message=f"No {amount.currency}->{target} rate available",
                    ),
                )
                continue
            out[target] = ConversionResult(
                target=target,
                conversion=Conversion(
                    from_amount=amount.amount,
                    from_currency=amount.currency,
                    to_symbol=target,
                    to_name=fiat_name(target),
                    to_amount=amount.amount * rate,
                    rate=Decimal(1) / rate,
                    provider=self._fiat.display_name,
                ),
            )
        return out

    async def _convert_crypto(
        self,
        amount: FiatAmount,
        targets: list[str],
        provider_ids: ProviderSelection,
        fallback: bool,
    ) -> dict[str, ConversionResult]:
        if not targets:
            return {}
        results = await self._resolver.resolve(
            targets, amount.currency, provider_ids, fallback=fallback
        )
        out: dict[str, ConversionResult] = {}
        for result in results:
            quote = result.quote
            if quote is None:
                out[result.symbol] = ConversionResult(target=result.symbol, error=result.error)
            elif quote.price == 0:
                out[result.symbol] = ConversionResult(
                    target=result.symbol,
                    error=FetchError(
                        kind=ErrorKind.PARSE_ERROR,
                        message=f"{quote.symbol} has a zero price; cannot convert",
                        provider=quote.provider,
                    ),
                )
            else:
                out[result.symbol] = ConversionResult(
                    target=result.symbol,
                    conversion=Conversion(
                        from_amount=amount.amount,
                        from_currency=amount.currency,
                        to_symbol=quote.symbol,
                        to_name=quote.name or quote.symbol,
                        to_amount=amount.amount / quote.price,
                        rate=quote.price,
                        provider=self._resolver.providers[quote.provider].display_name,
                    ),
                )
        return out
