"""Test drive repositories package."""
from .test_drive_repository import TestDriveRepository

__all__ = ['TestDriveRepository']
