"""Identity gate — verifies identity-provider bearer tokens.

The identity provider issues short-lived JWTs whose `sub` claim is the
provider's user id. Tokens are verified with PyJWT, against the provider's
JWKS (RS256) or, for local development, a shared HS256 secret. No database
access happens here; mapping an identity to a dealer is the dealer
resolver's job.
"""
import logging
from typing import Optional

import jwt
from flask_login import UserMixin

logger = logging.getLogger('dealerdesk.core.auth.identity')


class Identity(UserMixin):
    """Authenticated identity-provider user, as seen by Flask-Login."""

    def __init__(self, claims):
        self.id = claims['sub']
        self.email = claims.get('email')
        self.session_id = claims.get('sid')
        self.claims = claims

    def __repr__(self):
        return f'<Identity {self.id}>'


class IdentityVerifier:
    """Verify bearer tokens and turn their claims into an Identity."""

    def __init__(self, jwks_url=None, secret=None, issuer=None, audience=None,
                 authorized_parties=None, leeway=30, jwks_client=None):
        if not jwks_url and not secret and jwks_client is None:
            raise ValueError('IdentityVerifier needs a JWKS URL or a shared secret')
        self.secret = secret
        self.issuer = issuer
        self.audience = audience
        self.authorized_parties = list(authorized_parties or [])
        self.leeway = leeway
        self._jwks_client = jwks_client
        if self._jwks_client is None and jwks_url:
            self._jwks_client = jwt.PyJWKClient(jwks_url, cache_keys=True)

    @classmethod
    def from_config(cls, config) -> 'IdentityVerifier':
        return cls(
            jwks_url=config.IDENTITY_JWKS_URL,
            secret=config.IDENTITY_JWT_SECRET,
            issuer=config.IDENTITY_ISSUER,
            audience=config.IDENTITY_AUDIENCE,
            authorized_parties=config.IDENTITY_AUTHORIZED_PARTIES,
            leeway=config.IDENTITY_LEEWAY_SECONDS,
        )

    def _decode(self, token):
        options = {'require': ['exp', 'sub'], 'verify_aud': self.audience is not None}
        if self._jwks_client is not None:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            key, algorithms = signing_key.key, ['RS256']
        else:
            key, algorithms = self.secret, ['HS256']
        return jwt.decode(
            token,
            key,
            algorithms=algorithms,
            audience=self.audience,
            issuer=self.issuer,
            leeway=self.leeway,
            options=options,
        )

    def verify(self, token) -> Optional[Identity]:
        """Return the Identity for a valid token, or None."""
        if not token:
            return None
        try:
            claims = self._decode(token)
        except jwt.PyJWTError as e:
            logger.debug(f'Rejected bearer token: {e}')
            return None

        if self.authorized_parties:
            azp = claims.get('azp')
            if azp and azp not in self.authorized_parties:
                logger.debug(f'Rejected bearer token: unauthorized party {azp}')
                return None
        return Identity(claims)


def bearer_token(request):
    """Extract the token from an `Authorization: Bearer ...` header."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()
