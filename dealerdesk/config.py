"""
DealerDesk Configuration

Environment variables and settings for the web app, the database pool
and the identity provider.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() == 'true'


def _env_list(name: str) -> List[str]:
    raw = os.environ.get(name, '')
    return [item.strip() for item in raw.split(',') if item.strip()]


@dataclass
class AppConfig:
    """Application configuration settings."""

    # Database
    DATABASE_URL: Optional[str] = None
    DB_POOL_MIN_CONN: int = 2
    DB_POOL_MAX_CONN: int = 8
    DB_POOL_TIMEOUT: int = 10

    # Flask
    SECRET_KEY: Optional[str] = None
    DEBUG: bool = False
    TESTING: bool = False

    # Logging
    LOG_LEVEL: str = 'INFO'
    LOG_JSON: Optional[bool] = None       # None = auto-detect (gunicorn / PRODUCTION)

    # Identity provider (RS256 via JWKS, or HS256 shared secret for local dev)
    IDENTITY_JWKS_URL: Optional[str] = None
    IDENTITY_ISSUER: Optional[str] = None
    IDENTITY_AUDIENCE: Optional[str] = None
    IDENTITY_AUTHORIZED_PARTIES: List[str] = field(default_factory=list)
    IDENTITY_JWT_SECRET: Optional[str] = None
    IDENTITY_LEEWAY_SECONDS: int = 30

    # Domain defaults
    DEFAULT_COUNTRY: str = 'United Kingdom'
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 200

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from environment variables."""
        log_json = os.environ.get('LOG_JSON')
        return cls(
            DATABASE_URL=os.environ.get('DATABASE_URL'),
            DB_POOL_MIN_CONN=int(os.environ.get('DB_POOL_MIN_CONN', '2')),
            DB_POOL_MAX_CONN=int(os.environ.get('DB_POOL_MAX_CONN', '8')),
            DB_POOL_TIMEOUT=int(os.environ.get('DB_POOL_TIMEOUT', '10')),
            SECRET_KEY=os.environ.get('FLASK_SECRET_KEY', os.environ.get('SECRET_KEY')),
            DEBUG=_env_bool('FLASK_DEBUG'),
            TESTING=_env_bool('TESTING'),
            LOG_LEVEL=os.environ.get('LOG_LEVEL', 'INFO'),
            LOG_JSON=None if log_json is None else log_json.lower() == 'true',
            IDENTITY_JWKS_URL=os.environ.get('IDENTITY_JWKS_URL'),
            IDENTITY_ISSUER=os.environ.get('IDENTITY_ISSUER'),
            IDENTITY_AUDIENCE=os.environ.get('IDENTITY_AUDIENCE'),
            IDENTITY_AUTHORIZED_PARTIES=_env_list('IDENTITY_AUTHORIZED_PARTIES'),
            IDENTITY_JWT_SECRET=os.environ.get('IDENTITY_JWT_SECRET'),
            IDENTITY_LEEWAY_SECONDS=int(os.environ.get('IDENTITY_LEEWAY_SECONDS', '30')),
            DEFAULT_COUNTRY=os.environ.get('DEFAULT_COUNTRY', 'United Kingdom'),
            DEFAULT_PAGE_SIZE=int(os.environ.get('DEFAULT_PAGE_SIZE', '50')),
            MAX_PAGE_SIZE=int(os.environ.get('MAX_PAGE_SIZE', '200')),
        )
