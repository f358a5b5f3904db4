"""Auth repositories package."""
from .dealer_repository import DealerRepository

__all__ = ['DealerRepository']
