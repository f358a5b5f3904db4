"""Dealer Repository — tenant rows linked to identity-provider users."""

import json

from ...base_repository import BaseRepository


class DealerRepository(BaseRepository):

    def get_by_identity_user_id(self, identity_user_id):
        """Resolve exactly one dealer for an identity-provider user id."""
        if not identity_user_id:
            return None
        return self.query_one(
            'SELECT * FROM dealers WHERE identity_user_id = %s LIMIT 1',
            (identity_user_id,)
        )

    def upsert(self, identity_user_id, name, email, role='dealer', metadata=None):
        """Create the dealer for an identity, or refresh its profile fields."""
        return self.execute(
            '''INSERT INTO dealers (identity_user_id, name, email, role, metadata)
               VALUES (%s, %s, %s, %s, %s)
               ON CONFLICT (identity_user_id) DO UPDATE
               SET name = EXCLUDED.name,
                   email = EXCLUDED.email,
                   role = EXCLUDED.role,
                   metadata = COALESCE(EXCLUDED.metadata, dealers.metadata),
                   updated_at = NOW()
               RETURNING *''',
            (identity_user_id, name, email, role,
             json.dumps(metadata) if metadata is not None else None),
            returning=True
        )
