from .eoq import calculate_eoq, calculate_eoq_costs, total_annual_cost
from .safety_stock import (
    calculate_safety_stock, calculate_reorder_point_details,
    calculate_service_level, get_z_score
)
from .abc_classification import classify_by_value, classify_items, calculate_annual_value
from .demand_analytics import (
    aggregate_daily_demand, coefficient_of_variation,
    classify_demand_stability, summarize_sample, demand_days
)
from .reorder_parameters import compute_derived_fields, recompute_derived_fields
from .reorder import evaluate_reorder, run_sweep, sweep

__all__ = [
    'calculate_eoq',
    'calculate_eoq_costs',
    'total_annual_cost',
    'calculate_safety_stock',
    'calculate_reorder_point_details',
    'calculate_service_level',
    'get_z_score',
    'classify_by_value',
    'classify_items',
    'calculate_annual_value',
    'aggregate_daily_demand',
    'coefficient_of_variation',
    'classify_demand_stability',
    'summarize_sample',
    'demand_days',
    'compute_derived_fields',
    'recompute_derived_fields',
    'evaluate_reorder',
    'run_sweep',
    'sweep'
]
