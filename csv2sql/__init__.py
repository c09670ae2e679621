"""Load CSV files into SQLite and run ad-hoc queries against them."""

__version__ = "0.1.0"
