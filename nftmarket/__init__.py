"""In-memory NFT registry and marketplace with balances, series, listings and sales."""

__version__ = "0.1.0"