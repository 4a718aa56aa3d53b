"""Models for CoinGecko provider (API params and ticker-to-id table)."""
from pydantic import BaseModel


class CoinGeckoSimplePriceParams(BaseModel):
    """Params for /simple/price. Merge with 'ids' at call site."""

    vs_currencies: str = "usd"
    include_24hr_change: str = "true"
    include_market_cap: str = "true"


class CoinGeckoCoin(BaseModel):
    """A CoinGecko asset id with its display name."""

    id: str
    name: str


def _coin(coin_id: str, name: str) -> CoinGeckoCoin:
    return CoinGeckoCoin(id=coin_id, name=name)


# Upper-cased ticker (or common long name) -> CoinGecko asset id.
# See https://api.coingecko.com/api/v3/coins/list for all ids.
COINGECKO_COINS: dict[str, CoinGeckoCoin] = {
    "BTC": _coin("bitcoin", "Bitcoin"),
    "BITCOIN": _coin("bitcoin", "Bitcoin"),
    "ETH": _coin("ethereum", "Ethereum"),
    "ETHEREUM": _coin("ethereum", "Ethereum"),
    "USDT": _coin("tether", "Tether"),
    "TETHER": _coin("tether", "Tether"),
    "BNB": _coin("binancecoin", "BNB"),
    "SOL": _coin("solana", "Solana"),
    "SOLANA": _coin("solana", "Solana"),
    "XRP": _coin("ripple", "XRP"),
    "RIPPLE": _coin("ripple", "XRP"),
    "USDC": _coin("usd-coin", "USDC"),
    "ADA": _coin("cardano", "Cardano"),
    "CARDANO": _coin("cardano", "Cardano"),
    "DOGE": _coin("dogecoin", "Dogecoin"),
    "DOGECOIN": _coin("dogecoin", "Dogecoin"),
    "DOT": _coin("polkadot", "Polkadot"),
    "POLKADOT": _coin("polkadot", "Polkadot"),
    "MATIC": _coin("matic-network", "Polygon"),
    "POLYGON": _coin("matic-network", "Polygon"),
    "LTC": _coin("litecoin", "Litecoin"),
    "LITECOIN": _coin("litecoin", "Litecoin"),
    "AVAX": _coin("avalanche-2", "Avalanche"),
    "AVALANCHE": _coin("avalanche-2", "Avalanche"),
    "LINK": _coin("chainlink", "Chainlink"),
    "CHAINLINK": _coin("chainlink", "Chainlink"),
    "ATOM": _coin("cosmos", "Cosmos"),
    "COSMOS": _coin("cosmos", "Cosmos"),
    "UNI": _coin("uniswap", "Uniswap"),
    "UNISWAP": _coin("uniswap", "Uniswap"),
    "XLM": _coin("stellar", "Stellar"),
    "STELLAR": _coin("stellar", "Stellar"),
    "SHIB": _coin("shiba-inu", "Shiba Inu"),
    "TRX": _coin("tron", "TRON"),
    "TRON": _coin("tron", "TRON"),
    "TON": _coin("the-open-network", "Toncoin"),
    "PEPE": _coin("pepe", "Pepe"),
    "NEAR": _coin("near", "NEAR"),
    "APT": _coin("aptos", "Aptos"),
    "APTOS": _coin("aptos", "Aptos"),
    "ARB": _coin("arbitrum", "Arbitrum"),
    "ARBITRUM": _coin("arbitrum", "Arbitrum"),
    "OP": _coin("optimism", "Optimism"),
    "OPTIMISM": _coin("optimism", "Optimism"),
    "SUI": _coin("sui", "Sui"),
    "XMR": _coin("monero", "Monero"),
    "MONERO": _coin("monero", "Monero"),
}
