"""Quote resolver: fan requests out to providers and merge per-symbol outcomes.

The resolver holds the provider registry and the credentials for this
invocation. It never reads the environment; credentials come from Settings
(or a test) through the constructor.
"""
import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence

from cryptoprice.providers.core import ConfigError, PriceProviderABC
from cryptoprice.providers.core.utils import (dedupe, normalize_currency,
                                              normalize_symbol)
from cryptoprice.schemas import (ErrorKind, FetchError, FetchResult,
                                 ProviderId)

logger = logging.getLogger(__name__)

ProviderSelection = ProviderId | str | Sequence[ProviderId | str]


class QuoteResolver:
    """Resolves a list of symbols into an ordered list of FetchResults.

    Single-provider mode (default) asks exactly one provider. Fallback mode
    asks every listed provider concurrently and keeps, per symbol, the first
    success in the listed order; if all fail, the last provider's error wins.
    """

    def __init__(
        self,
        providers: Mapping[ProviderId, PriceProviderABC],
        credentials: Mapping[ProviderId, str | None] | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        """Initialize with providers and invocation config.

        Args:
            providers: Registry of available providers keyed by id.
            credentials: API keys per provider id (missing means no key).
            timeout: Optional invocation-wide bound in seconds. Pending provider
                calls are cancelled when it expires.
        """
        self._providers = dict(providers)
        self._credentials = dict(credentials or {})
        self._timeout = timeout

    @property
    def providers(self) -> dict[ProviderId, PriceProviderABC]:
        return dict(self._providers)

    def select(
        self, provider_ids: ProviderSelection, *, fallback: bool = False
    ) -> list[PriceProviderABC]:
        """Validate the provider choice and return providers in precedence order."""
        if isinstance(provider_ids, (ProviderId, str)):
            provider_ids = [provider_ids]
        ids: list[ProviderId] = []
        for raw in provider_ids:
            try:
                pid = raw if isinstance(raw, ProviderId) else ProviderId.parse(raw)
            except ValueError as exc:
                raise ConfigError(
                    f"unknown provider '{raw}' -- use --list-providers to see options"
                ) from exc
            if pid not in self._providers:
                raise ConfigError(f"provider '{pid.value}' is not configured")
            ids.append(pid)
        ids = dedupe(ids)
        if not ids:
            raise ConfigError("no provider selected")
        if len(ids) > 1 and not fallback:
            raise ConfigError(
                "several providers given; enable fallback mode to combine them"
            )
        return [self._providers[pid] for pid in ids]

    async def resolve(
        self,
        symbols: Iterable[str],
        currency: str,
        provider_ids: ProviderSelection = ProviderId.COINGECKO,
        *,
        fallback: bool = False,
    ) -> list[FetchResult]:
        """Fetch quotes for symbols, one FetchResult per requested position.

        Args:
            symbols: Tickers in the user's order; duplicates and any case allowed.
            currency: Quote currency code.
            provider_ids: Provider id, or ids in precedence order for fallback mode.
            fallback: Combine several providers, first success wins.

        Returns:
            FetchResults in input order; duplicated inputs repeat the same result.

        Raises:
            ConfigError: empty or blank symbols, unknown or misused providers.
        """
        try:
            requested = [normalize_symbol(s) for s in symbols]
            code = normalize_currency(currency)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if not requested:
            raise ConfigError("no symbols provided -- usage: cryptoprice btc eth")

        chosen = self.select(provider_ids, fallback=fallback)
        distinct = dedupe(requested)
        logger.info(
            "Fetching %s in %s from %s",
            ",".join(distinct),
            code,
            ",".join(p.id.value for p in chosen),
        )

        per_provider = await self._fan_out(chosen, distinct, code)
        merged = {
            symbol: self._merge([results[symbol] for results in per_provider])
            for symbol in distinct
        }
        return [merged[symbol] for symbol in requested]

    async def _fan_out(
        self,
        chosen: list[PriceProviderABC],
        symbols: list[str],
        currency: str,
    ) -> list[dict[str, FetchResult]]:
        """Run every provider call concurrently; one result dict per provider."""
        units: list[tuple[PriceProviderABC, list[str], asyncio.Task]] = []
        for provider in chosen:
            key = self._credentials.get(provider.id)
            # Per-symbol providers get one task per symbol so a global timeout
            # keeps whatever already finished.
            groups = [symbols] if provider.batch_requests else [[s] for s in symbols]
            for group in groups:
                task = asyncio.create_task(
                    provider.fetch_quotes(group, currency, key),
                    name=f"{provider.id.value}:{','.join(group)}",
                )
                units.append((provider, group, task))

        _, pending = await asyncio.wait(
            [task for _, _, task in units], timeout=self._timeout
        )
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        collected: dict[ProviderId, dict[str, FetchResult]] = {p.id: {} for p in chosen}
        for provider, group, task in units:
            if task in pending:
                logger.warning(
                    "%s did not finish within %ss for %s",
                    provider.display_name,
                    self._timeout,
                    ",".join(group),
                )
                collected[provider.id].update(
                    {s: self._timed_out(provider, s) for s in group}
                )
            else:
                collected[provider.id].update(task.result())
        return [collected[p.id] for p in chosen]

    def _timed_out(self, provider: PriceProviderABC, symbol: str) -> FetchResult:
        return FetchResult.failure(
            symbol,
            FetchError(
                kind=ErrorKind.TIMEOUT,
                message=f"{provider.display_name} did not answer within {self._timeout}s",
                provider=provider.id,
            ),
        )

    @staticmethod
    def _merge(candidates: list[FetchResult]) -> FetchResult:
        """First success in precedence order, else the last error."""
        for result in candidates:
            if result.ok:
                return result
        return candidates[-1]
