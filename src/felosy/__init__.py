"""felosy: personal asset valuation, portfolio accounting, zakat and halal screening."""

__version__ = "0.1.0"
