import math
from datetime import date
from typing import Dict, Optional

from inventory_optimization.exceptions import ValidationError

NON_NEGATIVE_ITEM_FIELDS = (
    'current_stock', 'unit_price', 'annual_demand', 'ordering_cost',
    'holding_cost', 'lead_time_days', 'demand_std_dev'
)

def _is_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False

def validate_item_parameters(params: Dict) -> Dict[str, str]:
    """Validate inventory item inputs.
    
    Unset (None) inputs are allowed; they only leave derived fields unset.
    
    Args:
        params: Mapping of item field name to value
        
    Returns:
        Dictionary with validation errors
    """
    errors = {}
    
    for field in NON_NEGATIVE_ITEM_FIELDS:
        value = params.get(field)
        if value is None:
            continue
        if not _is_number(value):
            errors[field] = f'{field} must be a finite number'
        elif float(value) < 0:
            errors[field] = f'{field} cannot be negative'
    
    for field in ('current_stock', 'lead_time_days'):
        value = params.get(field)
        if value is not None and field not in errors and float(value) != int(float(value)):
            errors[field] = f'{field} must be a whole number'
    
    if 'current_stock' in params and params['current_stock'] is None:
        errors['current_stock'] = 'current_stock is required'
    
    service_level = params.get('service_level')
    if service_level is not None:
        if not _is_number(service_level):
            errors['service_level'] = 'service_level must be a finite number'
        elif not 0.0 <= float(service_level) <= 1.0:
            errors['service_level'] = 'service_level must be between 0.0 and 1.0'
    
    return errors

def validate_demand_sample(
    period_start: date,
    period_end: date,
    total_demand,
    avg_daily_demand,
    demand_std_dev,
    min_daily_demand=None,
    max_daily_demand=None,
    tolerance: Optional[float] = None
) -> Dict[str, str]:
    """Validate a demand period sample.
    
    Args:
        period_start: First day of the window (inclusive)
        period_end: Last day of the window (inclusive)
        total_demand: Units consumed in the window
        avg_daily_demand: Client-supplied average daily demand
        demand_std_dev: Standard deviation of daily demand
        min_daily_demand: Optional smallest daily demand
        max_daily_demand: Optional largest daily demand
        tolerance: Allowed relative deviation of avg_daily_demand from
                   total_demand / days; skipped when None
        
    Returns:
        Dictionary with validation errors
    """
    errors = {}
    
    if period_start is None:
        errors['period_start'] = 'period_start is required'
    if period_end is None:
        errors['period_end'] = 'period_end is required'
    if period_start is not None and period_end is not None and period_start > period_end:
        errors['period_start'] = f'period_start ({period_start}) must be <= period_end ({period_end})'
    
    for field, value in (
        ('total_demand', total_demand),
        ('avg_daily_demand', avg_daily_demand),
        ('demand_std_dev', demand_std_dev)
    ):
        if value is None:
            errors[field] = f'{field} is required'
        elif not _is_number(value):
            errors[field] = f'{field} must be a finite number'
        elif float(value) < 0:
            errors[field] = f'{field} cannot be negative'
    
    for field, value in (('min_daily_demand', min_daily_demand), ('max_daily_demand', max_daily_demand)):
        if value is not None and (not _is_number(value) or float(value) < 0):
            errors[field] = f'{field} must be a non-negative number'
    
    if (min_daily_demand is not None and max_daily_demand is not None
            and 'min_daily_demand' not in errors and 'max_daily_demand' not in errors
            and float(min_daily_demand) > float(max_daily_demand)):
        errors['min_daily_demand'] = (
            f'min_daily_demand ({min_daily_demand}) must be <= max_daily_demand ({max_daily_demand})'
        )
    
    if tolerance is not None and not errors:
        from inventory_optimization.core.demand_analytics import (
            demand_days, average_matches_total
        )
        days = demand_days(period_start, period_end)
        if not average_matches_total(float(avg_daily_demand), float(total_demand), days, tolerance):
            errors['avg_daily_demand'] = (
                f'avg_daily_demand ({avg_daily_demand}) does not match '
                f'total_demand/days ({float(total_demand) / days:.4f})'
            )
    
    return errors

def raise_for_errors(errors: Dict[str, str], message: str = "Validation failed"):
    """Raise ValidationError carrying the field errors, if any."""
    if errors:
        raise ValidationError(message, code='INVALID_DATA', details=errors)
