"""GrowTrade: demo trading dashboard backend with live simulated prices."""

__version__ = "0.1.0"
