"""Stock action repositories package."""
from .vehicle_cost_repository import VehicleCostRepository
from .return_cost_repository import ReturnCostRepository

__all__ = ['VehicleCostRepository', 'ReturnCostRepository']
