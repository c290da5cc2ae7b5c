"""Configuration module for Deployer Hunter.

Usage:
    from deployerhunter.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.token_source)

Note:
    There is no module-level `settings` instance. Use `get_settings()` so
    tests can clear the cache and reload from a patched environment.
"""

from deployerhunter.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
