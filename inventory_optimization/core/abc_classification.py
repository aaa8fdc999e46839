# inventory_optimization/core/abc_classification.py
from decimal import Decimal
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple

from inventory_optimization.exceptions import ClassificationError
from inventory_optimization.models import ABCClassification

DEFAULT_A_THRESHOLD = 0.70
DEFAULT_B_THRESHOLD = 0.90

def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))

def calculate_annual_value(annual_demand, unit_price) -> Optional[Decimal]:
    """Annual consumption value annual_demand x unit_price, None when either is unset."""
    if annual_demand is None or unit_price is None:
        return None
    return _to_decimal(annual_demand) * _to_decimal(unit_price)

def classify_by_value(
    entries: Iterable[Tuple[Hashable, Any]],
    a_threshold: float = DEFAULT_A_THRESHOLD,
    b_threshold: float = DEFAULT_B_THRESHOLD
) -> Optional[List[Dict]]:
    """Rank entries by annual value and partition them into A, B and C.
    
    Entries are sorted by value descending, ties broken by key ascending, so
    equal inputs always produce the same partition. Walking the sorted list,
    the cumulative share of total value is computed after adding each entry;
    the entry is A while that share is <= a_threshold, B while <= b_threshold,
    otherwise C. A lone entry therefore reaches 100% and is classified C.
    
    Args:
        entries: (key, annual_value) pairs; keys must be mutually comparable
        a_threshold: Upper cumulative share for class A
        b_threshold: Upper cumulative share for class B
        
    Returns:
        List of dictionaries (key, rank, annual_value, cumulative_value,
        cumulative_percentage, classification) in rank order, or None when the
        total value is zero and no partition can be computed
        
    Raises:
        ClassificationError: on negative values or inconsistent thresholds
    """
    if not 0.0 <= a_threshold <= b_threshold <= 1.0:
        raise ClassificationError(
            f"Thresholds must satisfy 0 <= A ({a_threshold}) <= B ({b_threshold}) <= 1"
        )
    
    valued = []
    for key, value in entries:
        value = _to_decimal(value)
        if value < 0:
            raise ClassificationError(f"Annual value cannot be negative for {key}: {value}")
        valued.append((key, value))
    
    total_value = sum((value for _, value in valued), Decimal('0'))
    if total_value == 0:
        return None
    
    valued.sort(key=lambda entry: (-entry[1], entry[0]))
    
    a_limit = _to_decimal(a_threshold)
    b_limit = _to_decimal(b_threshold)
    cumulative_value = Decimal('0')
    results = []
    
    for rank, (key, value) in enumerate(valued, start=1):
        cumulative_value += value
        cumulative_share = cumulative_value / total_value
        
        if cumulative_share <= a_limit:
            classification = ABCClassification.A
        elif cumulative_share <= b_limit:
            classification = ABCClassification.B
        else:
            classification = ABCClassification.C
        
        results.append({
            'key': key,
            'rank': rank,
            'annual_value': value,
            'cumulative_value': cumulative_value,
            'cumulative_percentage': float(cumulative_share),
            'classification': classification
        })
    
    return results

def classify_items(
    items: Iterable[Any],
    a_threshold: float = DEFAULT_A_THRESHOLD,
    b_threshold: float = DEFAULT_B_THRESHOLD
) -> Optional[Dict[Hashable, ABCClassification]]:
    """Classify catalog items by annual value.
    
    Items without both annual_demand and unit_price are excluded from ranking
    and absent from the result.
    
    Args:
        items: Objects exposing id, annual_demand and unit_price
        a_threshold: Upper cumulative share for class A
        b_threshold: Upper cumulative share for class B
        
    Returns:
        Mapping of item id to classification, or None when total value is zero
    """
    entries = []
    for item in items:
        value = calculate_annual_value(item.annual_demand, item.unit_price)
        if value is not None:
            entries.append((item.id, value))
    
    ranked = classify_by_value(entries, a_threshold, b_threshold)
    if ranked is None:
        return None
    
    return {row['key']: row['classification'] for row in ranked}
