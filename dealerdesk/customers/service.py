"""Customer record validation and defaults."""

from datetime import datetime, timezone

from ..core.exceptions import ValidationError
from ..core.utils.payload import pick, blank_to_none, as_bool

STATUSES = ('active', 'inactive', 'prospect')
CONTACT_METHODS = ('email', 'phone', 'sms')
CONSENT_FIELDS = ('marketing_consent', 'sales_consent', 'gdpr_consent')

TEXT_FIELDS = (
    'first_name', 'last_name', 'email', 'phone', 'date_of_birth',
    'address_line_1', 'address_line_2', 'city', 'county', 'postcode',
    'country', 'notes', 'customer_source', 'preferred_contact_method',
    'enquiry_type', 'status',
)


def build_customer(body, default_country):
    """Validate a create/replace body and return the column dict to write.

    Raises ValidationError on missing names or unknown enum values.
    """
    record = {field: blank_to_none(pick(body, field)) for field in TEXT_FIELDS}

    if not record['first_name'] or not record['last_name']:
        raise ValidationError('First name and last name are required')

    if record['email']:
        record['email'] = record['email'].lower()

    record['country'] = record['country'] or default_country
    record['preferred_contact_method'] = record['preferred_contact_method'] or 'email'
    record['status'] = record['status'] or 'active'

    if record['status'] not in STATUSES:
        raise ValidationError(f'Invalid status. Use: {", ".join(STATUSES)}')
    if record['preferred_contact_method'] not in CONTACT_METHODS:
        raise ValidationError(
            f'Invalid preferred contact method. Use: {", ".join(CONTACT_METHODS)}')

    for field in CONSENT_FIELDS:
        record[field] = as_bool(pick(body, field, False))
    record['consent_date'] = (
        datetime.now(timezone.utc) if any(record[f] for f in CONSENT_FIELDS) else None
    )

    tags = pick(body, 'tags')
    if tags is not None and not isinstance(tags, list):
        raise ValidationError('tags must be a list')
    record['tags'] = tags or []

    custom_fields = pick(body, 'custom_fields')
    if custom_fields is not None and not isinstance(custom_fields, dict):
        raise ValidationError('custom_fields must be an object')
    record['custom_fields'] = custom_fields or {}

    return record
