"""Deployer Hunter - ranked dashboard of fresh Solana tokens."""

__version__ = "1.0.0"
