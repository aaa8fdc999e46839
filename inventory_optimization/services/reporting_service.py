# inventory_optimization/services/reporting_service.py
from typing import List, Dict, Optional
import logging

from sqlalchemy.orm import Session

from inventory_optimization.config import config
from inventory_optimization.models import InventoryItem, ABCClassification
from inventory_optimization.core.eoq import calculate_eoq_costs
from inventory_optimization.core.safety_stock import calculate_reorder_point_details
from inventory_optimization.core.demand_analytics import summarize_sample
from inventory_optimization.services.item_service import ItemService
from inventory_optimization.services.reorder_service import ReorderService
from inventory_optimization.services.analytics_service import DemandAnalyticsService
from inventory_optimization.utils.math_utils import to_float
from inventory_optimization.exceptions import NotFoundError

logger = logging.getLogger(__name__)

EOQ_INPUTS = ('annual_demand', 'ordering_cost', 'holding_cost')
ROP_INPUTS = ('annual_demand', 'lead_time_days', 'demand_std_dev', 'service_level')


def _missing(item: InventoryItem, fields) -> List[str]:
    return [field for field in fields if getattr(item, field) is None]


class ReportingService:
    """Read-only reporting views over inventory items and demand statistics."""
    
    def __init__(self, session: Session):
        """Initialize the reporting service.
        
        Args:
            session: Database session
        """
        self.session = session
        self.item_service = ItemService(session)
        self.analytics_service = DemandAnalyticsService(session)
        
        rules = config.business_rules
        self.days_per_year = rules['days_per_year']
        self.stable_cv_limit = rules['stable_cv_limit']
        self.variable_cv_limit = rules['variable_cv_limit']
    
    def eoq_breakdown(self, item_id: int, tenant_id: Optional[str] = None) -> Dict:
        """EOQ with its cost decomposition for one item.
        
        Items without usable EOQ inputs get None values and a list of the
        missing inputs.
        """
        item = self.item_service.require_item(item_id, tenant_id)
        costs = calculate_eoq_costs(
            item.annual_demand, item.ordering_cost, item.holding_cost, self.days_per_year
        ) or {}
        
        return {
            'item_id': item.id,
            'item_name': item.item_name,
            'annual_demand': item.annual_demand,
            'ordering_cost': to_float(item.ordering_cost),
            'holding_cost': to_float(item.holding_cost),
            'eoq': costs.get('eoq'),
            'orders_per_year': costs.get('orders_per_year'),
            'average_inventory': costs.get('average_inventory'),
            'annual_ordering_cost': costs.get('annual_ordering_cost'),
            'annual_holding_cost': costs.get('annual_holding_cost'),
            'total_inventory_cost': costs.get('total_inventory_cost'),
            'recommended_order_frequency_days': costs.get('recommended_order_frequency_days'),
            'current_stock': item.current_stock,
            'missing_inputs': _missing(item, EOQ_INPUTS)
        }
    
    def _rop_row(self, item: InventoryItem) -> Dict:
        details = calculate_reorder_point_details(
            item.annual_demand, item.lead_time_days, item.demand_std_dev,
            item.service_level, self.days_per_year
        ) or {}
        reorder_point = details.get('reorder_point')
        
        return {
            'item_id': item.id,
            'item_name': item.item_name,
            'annual_demand': item.annual_demand,
            'average_daily_demand': details.get('daily_demand'),
            'lead_time_days': item.lead_time_days,
            'demand_std_dev': item.demand_std_dev,
            'service_level': item.service_level,
            'z_score': details.get('z_score'),
            'lead_time_demand': details.get('lead_time_demand'),
            'safety_stock': details.get('safety_stock'),
            'reorder_point': reorder_point,
            'implied_service_level': details.get('implied_service_level'),
            'current_stock': item.current_stock,
            'units_below_rop': item.current_stock - reorder_point if reorder_point is not None else None,
            'reorder_needed': reorder_point is not None and item.current_stock <= reorder_point,
            'missing_inputs': _missing(item, ROP_INPUTS)
        }
    
    def reorder_point_breakdown(self, item_id: int, tenant_id: Optional[str] = None) -> Dict:
        """Reorder point with lead-time demand, safety stock and z-score for one item."""
        return self._rop_row(self.item_service.require_item(item_id, tenant_id))
    
    def items_below_reorder_point(self, tenant_id: str) -> List[Dict]:
        """Reorder point rows for every item at or below its reorder point."""
        items = ReorderService(self.session).get_items_below_reorder_point(tenant_id)
        return [self._rop_row(item) for item in items]
    
    def items_by_classification(self, tenant_id: str, classification: ABCClassification) -> List[Dict]:
        """Items of one ABC class, highest annual value first."""
        items = (
            self.session.query(InventoryItem)
            .filter(
                InventoryItem.tenant_id == tenant_id,
                InventoryItem.deleted_at.is_(None),
                InventoryItem.abc_classification == classification
            )
            .all()
        )
        items.sort(key=lambda item: (-(item.annual_value() or 0), item.id))
        
        return [{
            'item_id': item.id,
            'item_name': item.item_name,
            'annual_demand': item.annual_demand,
            'unit_price': to_float(item.unit_price),
            'annual_value': to_float(item.annual_value()),
            'classification': classification.value,
            'recommended_control_strategy': classification.control_strategy,
            'recommended_review_frequency': classification.review_frequency,
            'recommended_service_level': classification.recommended_service_level
        } for item in items]
    
    def latest_demand_statistics(self, item_id: int, tenant_id: Optional[str] = None) -> Dict:
        """Most recent demand statistics for one item."""
        item = self.item_service.require_item(item_id, tenant_id)
        sample = self.analytics_service.get_latest_sample(item.id, tenant_id)
        if sample is None:
            raise NotFoundError(
                f"No demand statistics recorded for item {item_id}",
                code='SAMPLE_NOT_FOUND'
            )
        
        report = summarize_sample(sample, self.stable_cv_limit, self.variable_cv_limit)
        report['item_name'] = item.item_name
        return report
    
    def demand_statistics_history(self, item_id: int, tenant_id: Optional[str] = None) -> List[Dict]:
        """All demand statistics for one item, most recent first."""
        item = self.item_service.require_item(item_id, tenant_id)
        return [
            summarize_sample(sample, self.stable_cv_limit, self.variable_cv_limit)
            for sample in self.analytics_service.get_sample_history(item.id, tenant_id)
        ]
