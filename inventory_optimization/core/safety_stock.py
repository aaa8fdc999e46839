# inventory_optimization/core/safety_stock.py
import math
from typing import Dict, Optional, Tuple

from scipy import stats

from inventory_optimization.exceptions import SafetyStockError
from inventory_optimization.utils.math_utils import Number, ceil_units, to_float

# (minimum service level, z-score). Service levels between breakpoints take
# the next lower tier; anything below the last tier falls back to the default.
Z_SCORE_TABLE = (
    (0.999, 3.090),
    (0.990, 2.326),
    (0.950, 1.645),
    (0.900, 1.282),
    (0.750, 0.674),
)
DEFAULT_Z_SCORE = 1.645

def get_z_score(service_level: float) -> float:
    """Map a service level (0.0-1.0) to a z-score using the step table.
    
    Args:
        service_level: Target probability of no stockout during lead time
        
    Returns:
        z-score of the highest tier the service level reaches
    """
    if service_level is None or not 0.0 <= service_level <= 1.0:
        raise SafetyStockError(
            f"Service level must be between 0.0 and 1.0, got {service_level}",
            code='INVALID_SERVICE_LEVEL'
        )
    
    for threshold, z_score in Z_SCORE_TABLE:
        if service_level >= threshold:
            return z_score
    
    return DEFAULT_Z_SCORE

def _check_inputs(annual_demand: float, lead_time_days: float, demand_std_dev: float):
    if annual_demand < 0 or lead_time_days < 0 or demand_std_dev < 0:
        raise SafetyStockError(
            "ROP parameters cannot be negative: "
            f"D={annual_demand}, L={lead_time_days}, sigma={demand_std_dev}",
            code='NEGATIVE_INPUT'
        )

def calculate_safety_stock(
    annual_demand: Optional[Number],
    lead_time_days: Optional[int],
    demand_std_dev: Optional[Number],
    service_level: Optional[Number],
    days_per_year: int = 365
) -> Optional[Tuple[int, int]]:
    """Calculate safety stock and reorder point.
    
    d = D / days_per_year
    SS = ceil(z * sigma * sqrt(L))
    ROP = ceil(d * L) + SS
    
    Args:
        annual_demand: Annual demand D in units
        lead_time_days: Supplier lead time L in days
        demand_std_dev: Standard deviation sigma of daily demand
        service_level: Target service level alpha (0.0-1.0)
        days_per_year: Days used to derive daily demand
        
    Returns:
        Tuple (safety_stock, reorder_point), or None when an input is unset
        
    Raises:
        SafetyStockError: if an input is negative or the service level is out of range
    """
    details = calculate_reorder_point_details(
        annual_demand, lead_time_days, demand_std_dev, service_level, days_per_year
    )
    if details is None:
        return None
    return details['safety_stock'], details['reorder_point']

def calculate_reorder_point_details(
    annual_demand: Optional[Number],
    lead_time_days: Optional[int],
    demand_std_dev: Optional[Number],
    service_level: Optional[Number],
    days_per_year: int = 365
) -> Optional[Dict]:
    """Calculate the reorder point with its components.
    
    Returns:
        Dictionary with daily_demand, lead_time_days, demand_std_dev,
        service_level, z_score, lead_time_demand, safety_stock, reorder_point
        and implied_service_level, or None when an input is unset
    """
    if (annual_demand is None or lead_time_days is None
            or demand_std_dev is None or service_level is None):
        return None
    
    d_annual = to_float(annual_demand)
    lead_time = to_float(lead_time_days)
    sigma = to_float(demand_std_dev)
    alpha = to_float(service_level)
    
    _check_inputs(d_annual, lead_time, sigma)
    z_score = get_z_score(alpha)
    
    daily_demand = d_annual / days_per_year
    lead_time_demand = ceil_units(daily_demand * lead_time)
    safety_stock = ceil_units(z_score * sigma * math.sqrt(lead_time))
    reorder_point = lead_time_demand + safety_stock
    
    if safety_stock < 0 or reorder_point < lead_time_demand:
        raise SafetyStockError(
            f"Safety stock and ROP must be non-negative: SS={safety_stock}, ROP={reorder_point}",
            code='INVARIANT_VIOLATION'
        )
    
    return {
        'daily_demand': daily_demand,
        'lead_time_days': lead_time_days,
        'demand_std_dev': sigma,
        'service_level': alpha,
        'z_score': z_score,
        'lead_time_demand': lead_time_demand,
        'safety_stock': safety_stock,
        'reorder_point': reorder_point,
        'implied_service_level': calculate_service_level(safety_stock, sigma, lead_time)
    }

def calculate_service_level(
    safety_stock: float,
    demand_std_dev: float,
    lead_time_days: float
) -> Optional[float]:
    """Service level actually attained by a given safety stock.
    
    Lead-time demand is taken as Normal(d*L, sigma^2 * L), so the no-stockout
    probability is Phi(SS / (sigma * sqrt(L))).
    
    Args:
        safety_stock: Safety stock in units
        demand_std_dev: Standard deviation of daily demand
        lead_time_days: Lead time in days
        
    Returns:
        Probability between 0.0 and 1.0, or None when demand during lead time
        has no variability (sigma or L is zero)
    """
    denominator = demand_std_dev * math.sqrt(lead_time_days)
    if denominator <= 0:
        return None
    
    return float(stats.norm.cdf(safety_stock / denominator))
