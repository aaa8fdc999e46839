# inventory_optimization/core/demand_analytics.py
from datetime import date
from typing import Any, Dict, Optional, Sequence

import numpy as np

from inventory_optimization.exceptions import ValidationError
from inventory_optimization.models import DemandStability
from inventory_optimization.utils.math_utils import safe_divide

DEFAULT_STABLE_CV_LIMIT = 0.5
DEFAULT_VARIABLE_CV_LIMIT = 1.0

def demand_days(period_start: date, period_end: date) -> int:
    """Divisor used to turn total demand into average daily demand.
    
    This is the difference between the two dates, floored at one so a
    single-day window does not divide by zero.
    """
    return max(1, (period_end - period_start).days)

def average_matches_total(
    avg_daily_demand: float,
    total_demand: float,
    days: int,
    tolerance: float
) -> bool:
    """Check a supplied average against total_demand / days.
    
    The allowed deviation is ``tolerance`` relative to the expected average,
    and never less than ``tolerance`` units for averages below one.
    """
    expected = total_demand / days
    allowed = tolerance * max(abs(expected), 1.0)
    return abs(avg_daily_demand - expected) <= allowed

def aggregate_daily_demand(
    daily_counts: Sequence[int],
    period_start: date,
    period_end: date
) -> Dict[str, Any]:
    """Turn daily consumption counts over a window into demand statistics.
    
    Args:
        daily_counts: Units consumed on each day of the window, one count per
                      day from period_start to period_end; empty when
                      nothing was recorded
        period_start: First day of the window (inclusive)
        period_end: Last day of the window (inclusive)
        
    Returns:
        Dictionary with period_start, period_end, days, total_demand,
        avg_daily_demand, demand_std_dev (sample standard deviation, 0.0 for
        fewer than two days), min_daily_demand and max_daily_demand (None when
        there are no counts)
        
    Raises:
        ValidationError: if the window is reversed, the number of counts does
                         not match the window, or a count is negative, fractional
                         or not finite
    """
    if period_start is None or period_end is None or period_start > period_end:
        raise ValidationError(
            f"period_start ({period_start}) must be <= period_end ({period_end})",
            code='INVALID_DATA',
            details={'period_start': 'period_start must be <= period_end'}
        )
    
    counts = np.asarray(list(daily_counts), dtype=float)
    window_days = (period_end - period_start).days + 1
    if counts.size and counts.size != window_days:
        raise ValidationError(
            f"Expected {window_days} daily counts for {period_start}..{period_end}, got {counts.size}",
            code='INVALID_DATA',
            details={'daily_counts': f'expected one count per day ({window_days}), got {counts.size}'}
        )
    
    if counts.size and (not np.all(np.isfinite(counts)) or np.any(counts < 0)
                        or np.any(counts != np.floor(counts))):
        raise ValidationError(
            "Daily demand counts must be non-negative whole numbers",
            code='INVALID_DATA',
            details={'daily_counts': 'daily counts must be non-negative whole numbers'}
        )
    
    days = demand_days(period_start, period_end)
    total_demand = int(counts.sum()) if counts.size else 0
    
    if counts.size > 1:
        demand_std_dev = float(np.std(counts, ddof=1))
    else:
        demand_std_dev = 0.0
    
    return {
        'period_start': period_start,
        'period_end': period_end,
        'days': days,
        'total_demand': total_demand,
        'avg_daily_demand': total_demand / days,
        'demand_std_dev': demand_std_dev,
        'min_daily_demand': int(counts.min()) if counts.size else None,
        'max_daily_demand': int(counts.max()) if counts.size else None
    }

def coefficient_of_variation(
    demand_std_dev: Optional[float],
    avg_daily_demand: Optional[float]
) -> Optional[float]:
    """CV = sigma / mu; undefined (None) when the mean is zero or either value is unset."""
    if demand_std_dev is None or avg_daily_demand is None:
        return None
    return safe_divide(demand_std_dev, avg_daily_demand)

def classify_demand_stability(
    cv: Optional[float],
    stable_limit: float = DEFAULT_STABLE_CV_LIMIT,
    variable_limit: float = DEFAULT_VARIABLE_CV_LIMIT
) -> Optional[DemandStability]:
    """Classify demand stability from the coefficient of variation.
    
    CV < stable_limit is stable, CV >= variable_limit is highly variable,
    anything between is moderate.
    """
    if cv is None:
        return None
    if cv < stable_limit:
        return DemandStability.STABLE
    if cv >= variable_limit:
        return DemandStability.HIGHLY_VARIABLE
    return DemandStability.MODERATE

def summarize_sample(
    sample: Any,
    stable_limit: float = DEFAULT_STABLE_CV_LIMIT,
    variable_limit: float = DEFAULT_VARIABLE_CV_LIMIT
) -> Dict[str, Any]:
    """Build the demand statistics report for a stored sample."""
    cv = coefficient_of_variation(sample.demand_std_dev, sample.avg_daily_demand)
    stability = classify_demand_stability(cv, stable_limit, variable_limit)
    
    demand_range = None
    if sample.min_daily_demand is not None and sample.max_daily_demand is not None:
        demand_range = sample.max_daily_demand - sample.min_daily_demand
    
    return {
        'sample_id': sample.id,
        'item_id': sample.item_id,
        'period_start': sample.period_start.isoformat(),
        'period_end': sample.period_end.isoformat(),
        'period_days': (sample.period_end - sample.period_start).days + 1,
        'total_demand': sample.total_demand,
        'avg_daily_demand': sample.avg_daily_demand,
        'demand_std_dev': sample.demand_std_dev,
        'min_daily_demand': sample.min_daily_demand,
        'max_daily_demand': sample.max_daily_demand,
        'demand_range': demand_range,
        'coefficient_of_variation': cv,
        'demand_stability': stability.value if stability else None,
        'is_stable_demand': stability == DemandStability.STABLE,
        'is_high_variability_demand': stability == DemandStability.HIGHLY_VARIABLE
    }
