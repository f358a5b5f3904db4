"""DealerDesk — multi-tenant car dealership back office API."""

__version__ = '1.0.0'
