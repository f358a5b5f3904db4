"""Company repositories package."""
from .company_settings_repository import CompanySettingsRepository

__all__ = ['CompanySettingsRepository']
