"""Personal finance tracking core: ledger, aggregation and AI advisory gateway"""

__version__ = "0.1.0"
