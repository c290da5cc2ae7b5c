"""pump.fun frontend API client."""

from deployerhunter.services.pumpfun.client import PumpFunClient

__all__ = ["PumpFunClient"]
