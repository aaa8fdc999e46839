# inventory_optimization/utils/math_utils.py
import math
from decimal import Decimal
from typing import Optional, Union

Number = Union[int, float, Decimal]

# Float products such as 0.1 * 70 land a hair above the integer they represent
CEIL_PRECISION = 9

def ceil_units(value: float) -> int:
    """Round a unit quantity up to the next whole unit.
    
    The value is first rounded to CEIL_PRECISION decimals so that float noise
    on an exact integer does not add a unit.
    
    Args:
        value: Quantity to round
        
    Returns:
        Smallest integer not less than value
    """
    return int(math.ceil(round(value, CEIL_PRECISION)))

def safe_divide(numerator: float, denominator: float) -> Optional[float]:
    """Divide, returning None when the denominator is zero."""
    if not denominator:
        return None
    return numerator / denominator

def to_float(value: Optional[Number]) -> Optional[float]:
    """Convert a numeric column value (Decimal, int, float) to float, keeping None."""
    if value is None:
        return None
    return float(value)
