"""Request payload helpers shared by the resource blueprints.

Bodies may use either column names (`first_name`) or the camelCase keys
sent by the web client (`firstName`); both resolve to the same column.
"""


def camel(name):
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def pick(body, column, default=None):
    """Read a column from a request body under its snake or camel key."""
    if column in body:
        return body[column]
    return body.get(camel(column), default)


def blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)
