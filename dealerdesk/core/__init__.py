"""DealerDesk core: database access, identity, shared API utilities."""
