"""Vehicle and return cost arithmetic.

All money is handled as Decimal and rounded half-up to pence. Values are
written back as strings so numeric columns and JSON payloads round-trip
without float drift.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ...core.exceptions import ValidationError

CATEGORIES = ('service', 'parts', 'repairs', 'dents', 'bodyshop')
FIXED_COSTS = (
    ('transport_in', 'transportIn'),
    ('transport_out', 'transportOut'),
    ('mot', 'mot'),
)

PENNY = Decimal('0.01')
ZERO = Decimal('0')


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(PENNY, rounding=ROUND_HALF_UP)


def to_amount(value, field='amount') -> Decimal:
    """Parse a money value. Empty values count as zero."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return ZERO
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f'{field} must be a number')
    if not amount.is_finite():
        raise ValidationError(f'{field} must be a number')
    return amount


def has_value(value) -> bool:
    """A fixed cost counts as supplied when it is non-empty and not zero."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return False
    return to_amount(value) != ZERO


# ============== Vehicle costs ==============

def validate_grouped(groups, label):
    """Check a grouped-cost object: known categories mapping to item lists."""
    if groups is None:
        return None
    if not isinstance(groups, dict):
        raise ValidationError(f'{label} must be an object')
    for category, items in groups.items():
        if category not in CATEGORIES:
            raise ValidationError(f'Unknown cost category: {category}')
        if not isinstance(items, list):
            raise ValidationError(f'{label}.{category} must be a list')
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError(f'{label}.{category} items must be objects')
            to_amount(item.get('amount'), f'{label}.{category} amount')
    return groups


def grouped_total(groups) -> Decimal:
    total = ZERO
    if not groups:
        return round_currency(total)
    for items in groups.values():
        if isinstance(items, list):
            total += sum((to_amount(item.get('amount')) for item in items), ZERO)
    return round_currency(total)


def has_items(groups) -> bool:
    return bool(groups) and any(isinstance(items, list) and items for items in groups.values())


def merge_grouped(existing, new):
    """Append new category items after the existing ones."""
    if not existing:
        return new
    if not new:
        return existing
    merged = {category: list(items) for category, items in existing.items()}
    for category, items in new.items():
        merged.setdefault(category, [])
        merged[category].extend(items)
    return merged


def merge_fixed(existing, new):
    if not has_value(new):
        return existing
    if has_value(existing):
        return str(to_amount(existing) + to_amount(new))
    return str(to_amount(new))


def calculate_vehicle_costs(existing, fixed_costs, grouped_costs, replace_mode=False):
    """Resolve the stored cost columns for a vehicle.

    Args:
        existing: current row for (dealer, stock) or None
        fixed_costs: {'transportIn', 'transportOut', 'mot'} from the request
        grouped_costs: {'exVat': {...}, 'incVat': {...}} from the request
        replace_mode: store the new data as given instead of merging

    Returns:
        dict of vehicle_costs columns including the four recomputed totals
    """
    fixed_costs = fixed_costs or {}
    grouped_costs = grouped_costs or {}
    if not isinstance(fixed_costs, dict):
        raise ValidationError('fixedCosts must be an object')
    if not isinstance(grouped_costs, dict):
        raise ValidationError('groupedCosts must be an object')

    new_fixed = {}
    for column, key in FIXED_COSTS:
        value = fixed_costs.get(key)
        amount = to_amount(value, key)
        blank = value is None or not str(value).strip()
        new_fixed[column] = None if blank else str(amount)
    ex_vat = validate_grouped(grouped_costs.get('exVat'), 'exVat') or None
    inc_vat = validate_grouped(grouped_costs.get('incVat'), 'incVat') or None

    result = dict(new_fixed, ex_vat_costs=ex_vat, inc_vat_costs=inc_vat)

    if existing and not replace_mode:
        supplied = (has_items(ex_vat) or has_items(inc_vat)
                    or any(has_value(fixed_costs.get(key)) for _, key in FIXED_COSTS))
        if supplied:
            result['ex_vat_costs'] = merge_grouped(existing.get('ex_vat_costs'), ex_vat)
            result['inc_vat_costs'] = merge_grouped(existing.get('inc_vat_costs'), inc_vat)
            for column, key in FIXED_COSTS:
                result[column] = merge_fixed(existing.get(column), fixed_costs.get(key))
        else:
            for column in ('ex_vat_costs', 'inc_vat_costs') + tuple(c for c, _ in FIXED_COSTS):
                result[column] = existing.get(column)

    fixed_total = round_currency(sum(
        (to_amount(result[column]) for column, _ in FIXED_COSTS), ZERO))
    ex_vat_total = grouped_total(result['ex_vat_costs'])
    inc_vat_total = grouped_total(result['inc_vat_costs'])

    result['fixed_costs_total'] = str(fixed_total)
    result['ex_vat_costs_total'] = str(ex_vat_total)
    result['inc_vat_costs_total'] = str(inc_vat_total)
    result['grand_total'] = str(round_currency(fixed_total + ex_vat_total + inc_vat_total))
    return result


# ============== Return costs ==============

def validate_cost_lines(lines, label):
    """Check a list of {description, price} lines."""
    if lines is None:
        return []
    if not isinstance(lines, list):
        raise ValidationError(f'{label} must be a list')
    for line in lines:
        if not isinstance(line, dict):
            raise ValidationError(f'{label} items must be objects')
        to_amount(line.get('price'), f'{label} price')
    return lines


def lines_total(lines) -> Decimal:
    return round_currency(sum((to_amount(line.get('price')) for line in lines or []), ZERO))


def return_cost_totals(row):
    """Add vatable/non-vatable/overall totals to a return_costs row."""
    vatable = lines_total(row.get('vatable_costs'))
    non_vatable = lines_total(row.get('non_vatable_costs'))
    return dict(
        row,
        vatable_costs=row.get('vatable_costs') or [],
        non_vatable_costs=row.get('non_vatable_costs') or [],
        vatable_total=str(vatable),
        non_vatable_total=str(non_vatable),
        total=str(round_currency(vatable + non_vatable)),
    )
