"""Read-only Solana NFT ownership and metadata lookups."""

__version__ = "0.1.0"
