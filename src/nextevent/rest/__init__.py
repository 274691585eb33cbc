"""REST layer

RestClient - HTTP requests against the application API
APIResponse / HALResponse - response wrappers
"""

from .client import RestClient
from .responses import APIResponse, HALResponse

__all__ = ["APIResponse", "HALResponse", "RestClient"]
