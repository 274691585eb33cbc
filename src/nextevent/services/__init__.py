"""Clients for the NextEvent IAM and payment services"""

from .iam import IAM_TOKEN_KEY, Credentials, IAMClient
from .payment import PaymentClient

__all__ = ["IAM_TOKEN_KEY", "Credentials", "IAMClient", "PaymentClient"]
