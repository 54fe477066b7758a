"""Seed prices for the market simulator."""

# Starting prices for the fixed symbol set
SEED_PRICES: dict[str, float] = {
    "AAPL": 175.50,
    "TSLA": 245.30,
    "AMZN": 138.20,
    "INFY": 18.75,
    "TCS": 3450.00,
}

# Random walk parameters
MAX_MOVE = 0.02  # +/-2% per tick
PRICE_FLOOR = 1.0  # No price is ever published below this
