"""Domain concept for mapping provider exceptions to the per-symbol error taxonomy."""
import asyncio
from dataclasses import dataclass

import httpx

from cryptoprice.providers.core.exceptions import ProviderError
from cryptoprice.schemas import ErrorKind, FetchError, ProviderId

# Exceptions from provider calls we map to FetchError; all others propagate (bugs).
PROVIDER_EXCEPTIONS: tuple[type[BaseException], ...] = (
    ProviderError,
    httpx.HTTPError,
    asyncio.TimeoutError,
    TimeoutError,
    ValueError,
    KeyError,
    TypeError,
    ArithmeticError,
)


@dataclass(frozen=True)
class ProviderErrorMapper:
    """Maps provider/backend exceptions to FetchError values.

    Each provider owns one, labelled with its id and API name, so error
    messages say which upstream failed.
    """

    provider: ProviderId | None = None
    api_name: str = "API"

    def to_fetch_error(
        self,
        exc: BaseException,
        symbol: str | None = None,
    ) -> FetchError:
        """Map a provider exception to a FetchError.

        Args:
            exc: The exception raised while fetching.
            symbol: Optional symbol to include in the message (e.g. "BTC").

        Returns:
            FetchError with kind from the closed taxonomy.
        """
        if isinstance(exc, ProviderError):
            return self._error(exc.kind, exc.message, status_code=exc.status_code)
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return self._error(
                ErrorKind.HTTP_STATUS,
                f"{self.api_name} returned {status} {exc.response.reason_phrase}".rstrip(),
                status_code=status,
            )
        if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
            detail = f"Request to {self.api_name} timed out"
            if symbol is not None:
                detail = f"{detail} for '{symbol}'"
            return self._error(ErrorKind.TIMEOUT, detail)
        if isinstance(exc, httpx.HTTPError):
            return self._error(
                ErrorKind.TRANSPORT,
                f"Could not reach {self.api_name}: {exc}" if str(exc) else f"Could not reach {self.api_name}",
            )
        if isinstance(exc, (ValueError, KeyError, TypeError, ArithmeticError)):
            return self._error(
                ErrorKind.PARSE_ERROR,
                f"Unexpected {self.api_name} payload: {exc}",
            )
        raise TypeError(f"Unmapped provider exception: {type(exc).__name__}") from exc

    def _error(
        self, kind: ErrorKind, message: str, *, status_code: int | None = None
    ) -> FetchError:
        return FetchError(
            kind=kind,
            message=message,
            status_code=status_code,
            provider=self.provider,
        )
