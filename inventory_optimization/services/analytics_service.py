# inventory_optimization/services/analytics_service.py
from datetime import date
from typing import List, Dict, Optional, Sequence
import logging

from sqlalchemy.orm import Session

from inventory_optimization.config import config
from inventory_optimization.models import DemandPeriodSample, InventoryItem
from inventory_optimization.core.demand_analytics import aggregate_daily_demand
from inventory_optimization.services.item_service import ItemService
from inventory_optimization.utils.validation import validate_demand_sample, raise_for_errors
from inventory_optimization.exceptions import NotFoundError, InventoryOptimizationError

logger = logging.getLogger(__name__)


class DemandAnalyticsService:
    """Service for recording demand statistics and feeding them into items."""
    
    def __init__(self, session: Session):
        """Initialize the demand analytics service.
        
        Args:
            session: Database session
        """
        self.session = session
        self.item_service = ItemService(session)
        
        rules = config.business_rules
        self.days_per_year = rules['days_per_year']
        self.tolerance = rules['avg_daily_demand_tolerance']
    
    def _store(self, item: InventoryItem, stats: Dict) -> DemandPeriodSample:
        sample = DemandPeriodSample(
            tenant_id=item.tenant_id,
            item_id=item.id,
            period_start=stats['period_start'],
            period_end=stats['period_end'],
            total_demand=int(stats['total_demand']),
            avg_daily_demand=float(stats['avg_daily_demand']),
            demand_std_dev=float(stats['demand_std_dev']),
            min_daily_demand=stats.get('min_daily_demand'),
            max_daily_demand=stats.get('max_daily_demand')
        )
        self.session.add(sample)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return sample
    
    def record_daily_demand(
        self,
        item_id: int,
        daily_counts: Sequence[int],
        period_start: date,
        period_end: date,
        tenant_id: Optional[str] = None
    ) -> DemandPeriodSample:
        """Aggregate daily consumption counts into a stored demand sample.
        
        Args:
            item_id: Item ID
            daily_counts: Units consumed per day in the window
            period_start: First day of the window (inclusive)
            period_end: Last day of the window (inclusive)
            tenant_id: Optional tenant scope
            
        Returns:
            The stored sample
        """
        item = self.item_service.require_item(item_id, tenant_id)
        stats = aggregate_daily_demand(daily_counts, period_start, period_end)
        
        sample = self._store(item, stats)
        logger.debug(
            f"Recorded demand for item {item.id} {period_start}..{period_end}: "
            f"total={sample.total_demand}, sigma={sample.demand_std_dev:.4f}"
        )
        return sample
    
    def record_sample(
        self,
        item_id: int,
        period_start: date,
        period_end: date,
        total_demand: int,
        avg_daily_demand: float,
        demand_std_dev: float,
        min_daily_demand: Optional[int] = None,
        max_daily_demand: Optional[int] = None,
        tenant_id: Optional[str] = None
    ) -> DemandPeriodSample:
        """Store client-supplied demand statistics after validating them.
        
        The supplied average must agree with total_demand / days within the
        configured tolerance.
        """
        item = self.item_service.require_item(item_id, tenant_id)
        
        errors = validate_demand_sample(
            period_start, period_end, total_demand, avg_daily_demand, demand_std_dev,
            min_daily_demand, max_daily_demand, tolerance=self.tolerance
        )
        raise_for_errors(errors, "Invalid demand sample")
        
        return self._store(item, {
            'period_start': period_start,
            'period_end': period_end,
            'total_demand': total_demand,
            'avg_daily_demand': avg_daily_demand,
            'demand_std_dev': demand_std_dev,
            'min_daily_demand': min_daily_demand,
            'max_daily_demand': max_daily_demand
        })
    
    def _sample_query(self, item_id: int, tenant_id: Optional[str] = None):
        query = self.session.query(DemandPeriodSample).filter(
            DemandPeriodSample.item_id == item_id,
            DemandPeriodSample.deleted_at.is_(None)
        )
        if tenant_id is not None:
            query = query.filter(DemandPeriodSample.tenant_id == tenant_id)
        return query.order_by(
            DemandPeriodSample.period_start.desc(),
            DemandPeriodSample.id.desc()
        )
    
    def get_latest_sample(self, item_id: int, tenant_id: Optional[str] = None) -> Optional[DemandPeriodSample]:
        """Get the most recent demand sample for an item."""
        return self._sample_query(item_id, tenant_id).first()
    
    def get_sample_history(self, item_id: int, tenant_id: Optional[str] = None) -> List[DemandPeriodSample]:
        """Get all demand samples for an item, most recent first."""
        return self._sample_query(item_id, tenant_id).all()
    
    def apply_sample_to_item(
        self,
        item_id: int,
        sample: Optional[DemandPeriodSample] = None,
        update_annual_demand: bool = True,
        tenant_id: Optional[str] = None
    ) -> InventoryItem:
        """Write demand statistics into an item's demand fields.
        
        Sets demand_std_dev from the sample and, when requested, annual_demand
        as avg_daily_demand x days_per_year. The change goes through the normal
        parameter write, so derived fields are recomputed.
        
        Args:
            item_id: Item ID
            sample: Sample to apply (defaults to the most recent one)
            update_annual_demand: Whether to annualise the sample's average
            tenant_id: Optional tenant scope
            
        Returns:
            The updated item
        """
        if sample is None:
            sample = self.get_latest_sample(item_id, tenant_id)
            if sample is None:
                raise NotFoundError(
                    f"No demand statistics recorded for item {item_id}",
                    code='SAMPLE_NOT_FOUND'
                )
        
        params = {'demand_std_dev': sample.demand_std_dev}
        if update_annual_demand:
            params['annual_demand'] = sample.avg_daily_demand * self.days_per_year
        
        return self.item_service.update_parameters(item_id, tenant_id, **params)
    
    def refresh_demand_statistics(
        self,
        tenant_id: str,
        consumption: Dict[int, Sequence[int]],
        period_start: date,
        period_end: date,
        apply_to_items: bool = True
    ) -> Dict:
        """Record demand samples for many items and optionally feed them into the items.
        
        A rejected item is logged and skipped; the remaining items are still processed.
        
        Args:
            tenant_id: Tenant scope
            consumption: Mapping of item ID to daily consumption counts
            period_start: First day of the window (inclusive)
            period_end: Last day of the window (inclusive)
            apply_to_items: Whether to update item demand fields from the new samples
            
        Returns:
            Dictionary with recorded count, updated count and failed items
        """
        recorded = 0
        updated = 0
        failed_items = []
        
        for item_id, daily_counts in consumption.items():
            try:
                sample = self.record_daily_demand(item_id, daily_counts, period_start, period_end, tenant_id)
                recorded += 1
                if apply_to_items:
                    self.apply_sample_to_item(item_id, sample, tenant_id=tenant_id)
                    updated += 1
            except InventoryOptimizationError as e:
                logger.warning(f"Skipping demand refresh for item {item_id}: {e}")
                failed_items.append({'item_id': item_id, 'error': e.to_dict()})
        
        return {
            'success': not failed_items,
            'recorded_samples': recorded,
            'updated_items': updated,
            'failed_items': failed_items
        }
