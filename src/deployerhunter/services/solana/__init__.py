"""Solana JSON-RPC client."""

from deployerhunter.services.solana.rpc_client import SolanaRPCClient

__all__ = ["SolanaRPCClient"]
