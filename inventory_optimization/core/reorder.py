# inventory_optimization/core/reorder.py
import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from inventory_optimization.exceptions import ReorderError

logger = logging.getLogger(__name__)

def evaluate_reorder(item: Any) -> Optional[Dict]:
    """Build the reorder signal for one item, or None if no reorder is needed.
    
    A signal is raised when the item has a reorder point and its current stock
    is at or below it. The recommended quantity is floor(EOQ), or None when the
    item has no EOQ.
    """
    if getattr(item, 'deleted_at', None) is not None:
        return None
    
    if item.reorder_point is None:
        return None
    
    if item.current_stock is None:
        raise ReorderError(f"Item {item.id} has no current stock figure")
    
    if item.current_stock > item.reorder_point:
        return None
    
    recommended = None
    if item.economic_order_quantity is not None:
        recommended = int(math.floor(item.economic_order_quantity))
    
    return {
        'item_id': item.id,
        'item_code': getattr(item, 'item_code', None),
        'item_name': getattr(item, 'item_name', None),
        'current_stock': item.current_stock,
        'reorder_point': item.reorder_point,
        'units_below_rop': item.current_stock - item.reorder_point,
        'recommended_order_qty': recommended
    }

def run_sweep(items: Iterable[Any]) -> Dict:
    """Evaluate every item against its reorder point.
    
    A failure on one item is logged and recorded; the sweep carries on with
    the remaining items. Nothing on the items is modified.
    
    Args:
        items: Inventory items to check
        
    Returns:
        Dictionary with signals, evaluated count and failed_items
    """
    signals = []
    failed_items = []
    evaluated = 0
    
    for item in items:
        evaluated += 1
        item_id = getattr(item, 'id', None)
        try:
            signal = evaluate_reorder(item)
        except Exception as e:
            logger.exception(f"Error evaluating reorder point for item {item_id}: {e}")
            failed_items.append({'item_id': item_id, 'error': str(e)})
            continue
        
        if signal is not None:
            logger.info(
                f"Reorder alert: item {item_id} | current: {signal['current_stock']} | "
                f"ROP: {signal['reorder_point']} | suggested order: {signal['recommended_order_qty']}"
            )
            signals.append(signal)
    
    return {
        'signals': signals,
        'evaluated': evaluated,
        'failed_items': failed_items
    }

def sweep(items: Iterable[Any]) -> List[Dict]:
    """Reorder signals for every item at or below its reorder point."""
    return run_sweep(items)['signals']
