# inventory_optimization/core/eoq.py
import math
from typing import Dict, Optional

from inventory_optimization.exceptions import EOQError
from inventory_optimization.utils.math_utils import Number, to_float

def calculate_eoq(
    annual_demand: Optional[Number],
    ordering_cost: Optional[Number],
    holding_cost: Optional[Number]
) -> Optional[float]:
    """Calculate the Economic Order Quantity Q* = sqrt(2DS/H).
    
    Q* is the unique minimiser of TC(Q) = (D/Q)S + (Q/2)H. An ordering cost of
    zero yields 0.0, meaning ordering in batches brings no benefit.
    
    Args:
        annual_demand: Annual demand D in units
        ordering_cost: Fixed cost S per order
        holding_cost: Holding cost H per unit per year
        
    Returns:
        Optimal order quantity, or None when an input is unset or D or H is zero
        
    Raises:
        EOQError: if any input is negative
    """
    if annual_demand is None or ordering_cost is None or holding_cost is None:
        return None
    
    d = to_float(annual_demand)
    s = to_float(ordering_cost)
    h = to_float(holding_cost)
    
    if d < 0 or s < 0 or h < 0:
        raise EOQError(
            f"EOQ parameters cannot be negative: D={d}, S={s}, H={h}",
            code='NEGATIVE_INPUT'
        )
    
    if d == 0 or h == 0:
        return None
    
    return math.sqrt((2.0 * d * s) / h)

def total_annual_cost(
    order_quantity: float,
    annual_demand: Number,
    ordering_cost: Number,
    holding_cost: Number
) -> float:
    """Total annual inventory cost TC(Q) = (D/Q)S + (Q/2)H for a given order size.
    
    Args:
        order_quantity: Order size Q (must be positive)
        annual_demand: Annual demand D
        ordering_cost: Cost S per order
        holding_cost: Holding cost H per unit per year
        
    Returns:
        Annual ordering cost plus annual holding cost
    """
    if order_quantity <= 0:
        raise EOQError(f"Order quantity must be positive, got {order_quantity}")
    
    ordering = (to_float(annual_demand) / order_quantity) * to_float(ordering_cost)
    holding = (order_quantity / 2.0) * to_float(holding_cost)
    return ordering + holding

def calculate_eoq_costs(
    annual_demand: Optional[Number],
    ordering_cost: Optional[Number],
    holding_cost: Optional[Number],
    days_per_year: int = 365
) -> Optional[Dict[str, Optional[float]]]:
    """Calculate EOQ together with its cost decomposition.
    
    At Q* the annual ordering cost equals the annual holding cost, each being
    half of the total.
    
    Args:
        annual_demand: Annual demand D in units
        ordering_cost: Fixed cost S per order
        holding_cost: Holding cost H per unit per year
        days_per_year: Days used to turn orders per year into an order interval
        
    Returns:
        Dictionary with eoq, orders_per_year, average_inventory,
        annual_ordering_cost, annual_holding_cost, total_inventory_cost and
        recommended_order_frequency_days, or None when EOQ cannot be computed
    """
    eoq = calculate_eoq(annual_demand, ordering_cost, holding_cost)
    if eoq is None:
        return None
    
    d = to_float(annual_demand)
    s = to_float(ordering_cost)
    h = to_float(holding_cost)
    
    if eoq == 0:
        return {
            'eoq': 0.0,
            'orders_per_year': None,
            'average_inventory': 0.0,
            'annual_ordering_cost': 0.0,
            'annual_holding_cost': 0.0,
            'total_inventory_cost': 0.0,
            'recommended_order_frequency_days': None
        }
    
    orders_per_year = d / eoq
    average_inventory = eoq / 2.0
    annual_ordering_cost = orders_per_year * s
    annual_holding_cost = average_inventory * h
    
    return {
        'eoq': eoq,
        'orders_per_year': orders_per_year,
        'average_inventory': average_inventory,
        'annual_ordering_cost': annual_ordering_cost,
        'annual_holding_cost': annual_holding_cost,
        'total_inventory_cost': annual_ordering_cost + annual_holding_cost,
        'recommended_order_frequency_days': days_per_year / orders_per_year
    }
