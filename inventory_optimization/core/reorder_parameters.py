# inventory_optimization/core/reorder_parameters.py
from typing import Any, Dict, Optional

from inventory_optimization.core.eoq import calculate_eoq
from inventory_optimization.core.safety_stock import calculate_safety_stock
from inventory_optimization.utils.validation import validate_item_parameters, raise_for_errors

INPUT_FIELDS = (
    'current_stock', 'unit_price', 'annual_demand', 'ordering_cost', 'holding_cost',
    'lead_time_days', 'demand_std_dev', 'service_level'
)

DERIVED_FIELDS = ('economic_order_quantity', 'safety_stock', 'reorder_point')

def item_inputs(item: Any) -> Dict[str, Any]:
    """Read the input fields of an item into a dictionary."""
    return {field: getattr(item, field, None) for field in INPUT_FIELDS}

def compute_derived_fields(params: Dict[str, Any], days_per_year: int = 365) -> Dict[str, Optional[Any]]:
    """Compute every derived field from a full set of item inputs.
    
    Inputs are validated first; nothing is computed for an invalid set.
    A field whose inputs are incomplete comes back as None. An EOQ of zero
    (no ordering cost) also comes back as None since stored EOQs are positive.
    
    Args:
        params: Mapping of input field name to value
        days_per_year: Days used to derive daily demand
        
    Returns:
        Dictionary with economic_order_quantity, safety_stock and reorder_point
        
    Raises:
        ValidationError: if any supplied input violates a domain constraint
    """
    raise_for_errors(validate_item_parameters(params), "Invalid inventory parameters")
    
    eoq = calculate_eoq(
        params.get('annual_demand'),
        params.get('ordering_cost'),
        params.get('holding_cost')
    )
    if eoq is not None and eoq <= 0:
        eoq = None
    
    safety_stock = None
    reorder_point = None
    rop_result = calculate_safety_stock(
        params.get('annual_demand'),
        params.get('lead_time_days'),
        params.get('demand_std_dev'),
        params.get('service_level'),
        days_per_year
    )
    if rop_result is not None:
        safety_stock, reorder_point = rop_result
    
    return {
        'economic_order_quantity': eoq,
        'safety_stock': safety_stock,
        'reorder_point': reorder_point
    }

def recompute_derived_fields(item: Any, days_per_year: int = 365) -> Any:
    """Recompute and assign all derived fields of an item before it is persisted.
    
    The derived values are computed in full before any attribute is assigned,
    so a rejected item keeps its previous derived state. The ABC class is
    cleared when the item no longer has both annual demand and unit price;
    otherwise it is left for the next catalog-wide analysis.
    
    Args:
        item: Inventory item (or any object with the same attributes)
        days_per_year: Days used to derive daily demand
        
    Returns:
        The same item with derived fields updated
        
    Raises:
        ValidationError: if any input violates a domain constraint
    """
    derived = compute_derived_fields(item_inputs(item), days_per_year)
    
    for field in DERIVED_FIELDS:
        setattr(item, field, derived[field])
    
    if item.annual_demand is None or item.unit_price is None:
        item.abc_classification = None
    
    return item
