"""Validation models for data sent to the NextEvent services"""

from .customer import Customer, CustomerAddress

__all__ = ["Customer", "CustomerAddress"]
