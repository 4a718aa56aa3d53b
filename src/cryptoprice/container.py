"""DI container. Build with init_container(settings); the CLI pulls services from it."""
from dependency_injector import containers, providers

from cryptoprice.config import Settings
from cryptoprice.providers import (CoinGeckoProvider, CoinMarketCapProvider,
                                   FrankfurterProvider)
from cryptoprice.providers.core import build_http_client
from cryptoprice.schemas import ProviderId
from cryptoprice.services import ConversionService, QuoteResolver


class Container(containers.DeclarativeContainer):
    settings = providers.Dependency(instance_of=Settings)

    # One connection pool for every provider in the invocation.
    http_client = providers.Singleton(
        build_http_client,
        timeout=settings.provided.request_timeout,
    )

    coingecko_provider = providers.Singleton(
        CoinGeckoProvider,
        base_url=settings.provided.coingecko_base_url,
        client=http_client,
        timeout=settings.provided.request_timeout,
    )
    coinmarketcap_provider = providers.Singleton(
        CoinMarketCapProvider,
        base_url=settings.provided.coinmarketcap_base_url,
        client=http_client,
        timeout=settings.provided.request_timeout,
    )
    frankfurter_provider = providers.Singleton(
        FrankfurterProvider,
        base_url=settings.provided.frankfurter_base_url,
        client=http_client,
        timeout=settings.provided.request_timeout,
    )

    price_providers = providers.Dict(
        {
            ProviderId.COINGECKO: coingecko_provider,
            ProviderId.COINMARKETCAP: coinmarketcap_provider,
        }
    )

    resolver = providers.Factory(
        QuoteResolver,
        providers=price_providers,
        credentials=providers.Callable(Settings.credentials, settings),
        timeout=settings.provided.invocation_timeout,
    )
    conversion_service = providers.Factory(
        ConversionService,
        resolver=resolver,
        fiat_provider=frankfurter_provider,
    )


def init_container(settings: Settings) -> Container:
    """Create a container bound to the given settings."""
    container = Container()
    container.settings.override(providers.Object(settings))
    return container


async def shutdown(container: Container) -> None:
    """Close the shared HTTP client and drop the singletons built on it."""
    await container.http_client().aclose()
    container.reset_singletons()
