"""Static tables for the reading sources."""

# Proxy paths for each symbol's implied-volatility (QVIX) series.
# Index futures map to the option index on the same underlying.
SERIES_ENDPOINTS: dict[str, str] = {
    "ETF50": "/index_option_50etf_qvix",
    "IF": "/index_option_300index_qvix",  # CSI 300 futures
    "CSI300": "/index_option_300index_qvix",
    "IC": "/index_option_500index_qvix",  # CSI 500 futures
    "CSI500": "/index_option_500index_qvix",
    "IH": "/index_option_50index_qvix",  # SSE 50 futures
    "SSE50": "/index_option_50index_qvix",
    "IM": "/index_option_1000index_qvix",  # CSI 1000 futures
    "CSI1000": "/index_option_1000index_qvix",
}

# Fallback volatility used when a symbol cannot be fetched
FUTURES_FALLBACK_VOLATILITY = 4.4  # symbols containing "F"
FALLBACK_VOLATILITY = 3.6

# Synthetic source defaults (annualized IV, in percent)
SYNTHETIC_LOW = 10.0
SYNTHETIC_HIGH = 40.0
SYNTHETIC_WALK_STEP = 0.5  # stdev of one random-walk step
SYNTHETIC_FLOOR = 1.0  # a walk never goes below this


def fallback_volatility(symbol: str) -> float:
    """Fixed substitute volatility for a symbol that could not be fetched."""
    return FUTURES_FALLBACK_VOLATILITY if "F" in symbol else FALLBACK_VOLATILITY
