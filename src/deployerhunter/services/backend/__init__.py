"""First-party backend proxy client."""

from deployerhunter.services.backend.client import BackendProxyClient

__all__ = ["BackendProxyClient"]
