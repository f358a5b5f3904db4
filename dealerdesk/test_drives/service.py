"""Test-drive entry validation and defaults.

Customer contact fields are a snapshot taken when the drive is booked,
not a link to the customers table.
"""

import re
from datetime import date

from ..core.exceptions import ValidationError
from ..core.utils.payload import pick, blank_to_none

STATUSES = ('scheduled', 'in-progress', 'completed', 'cancelled')
DEFAULT_TIME = '09:00'
DEFAULT_DURATION = 30

ADDRESS_FIELDS = ('address_line_1', 'address_line_2', 'city', 'county', 'postcode')
SNAPSHOT_FIELDS = (
    'vehicle_registration', 'vehicle_make', 'vehicle_model',
    'customer_name', 'customer_email', 'customer_phone',
    'driving_license_file', 'notes',
)

_TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def _parse_date(value):
    if not value:
        return date.today()
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError('test_drive_date must be YYYY-MM-DD')


def _parse_positive_int(value, field):
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a positive integer')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a positive integer')
    if number <= 0 or str(number) != str(value).strip():
        raise ValidationError(f'{field} must be a positive integer')
    return number


def build_test_drive(body, default_country):
    """Validate a create/replace body and return the column dict to write."""
    record = {field: blank_to_none(pick(body, field)) for field in SNAPSHOT_FIELDS}

    if not record['vehicle_registration']:
        raise ValidationError('Vehicle registration is required')
    record['vehicle_registration'] = record['vehicle_registration'].upper()

    same_as_id = blank_to_none(pick(body, 'address_same_as_id'))
    if not same_as_id:
        raise ValidationError('Address information is required')
    same_as_id = str(same_as_id).lower()
    if same_as_id not in ('yes', 'no'):
        raise ValidationError("address_same_as_id must be 'yes' or 'no'")
    record['address_same_as_id'] = same_as_id

    # Separate address only when it differs from the one on the ID
    for field in ADDRESS_FIELDS:
        record[field] = blank_to_none(pick(body, field)) if same_as_id == 'no' else None
    country = blank_to_none(pick(body, 'country')) if same_as_id == 'no' else None
    record['country'] = country or default_country

    year = blank_to_none(pick(body, 'vehicle_year'))
    record['vehicle_year'] = _parse_positive_int(year, 'vehicle_year') if year is not None else None

    record['test_drive_date'] = _parse_date(blank_to_none(pick(body, 'test_drive_date')))

    time_value = blank_to_none(pick(body, 'test_drive_time')) or DEFAULT_TIME
    if not _TIME_RE.match(str(time_value)):
        raise ValidationError('test_drive_time must be HH:MM')
    record['test_drive_time'] = time_value

    duration = blank_to_none(pick(body, 'estimated_duration'))
    record['estimated_duration'] = (
        _parse_positive_int(duration, 'estimated_duration') if duration is not None
        else DEFAULT_DURATION
    )

    record['status'] = blank_to_none(pick(body, 'status')) or 'scheduled'
    if record['status'] not in STATUSES:
        raise ValidationError(f'Invalid status. Use: {", ".join(STATUSES)}')

    return record
