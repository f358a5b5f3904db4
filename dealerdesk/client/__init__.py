"""Python client for the DealerDesk API."""
from .api_client import ApiError, DealerDeskClient
from .resource_query import ResourceQuery

__all__ = ['ApiError', 'DealerDeskClient', 'ResourceQuery']
