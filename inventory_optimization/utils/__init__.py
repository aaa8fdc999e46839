from .math_utils import ceil_units, safe_divide, to_float
from .validation import (
    validate_item_parameters, validate_demand_sample, raise_for_errors
)

__all__ = [
    'ceil_units',
    'safe_divide',
    'to_float',
    'validate_item_parameters',
    'validate_demand_sample',
    'raise_for_errors'
]
