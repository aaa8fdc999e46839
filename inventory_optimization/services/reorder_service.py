# inventory_optimization/services/reorder_service.py
from typing import List, Dict
import logging

from sqlalchemy.orm import Session

from inventory_optimization.models import InventoryItem
from inventory_optimization.core.reorder import run_sweep

logger = logging.getLogger(__name__)


class ReorderService:
    """Read-only reorder monitoring over a tenant's catalog."""
    
    def __init__(self, session: Session):
        """Initialize the reorder service.
        
        Args:
            session: Database session
        """
        self.session = session
    
    def _active_items(self, tenant_id: str):
        return self.session.query(InventoryItem).filter(
            InventoryItem.tenant_id == tenant_id,
            InventoryItem.deleted_at.is_(None)
        )
    
    def run_reorder_sweep(self, tenant_id: str) -> Dict:
        """Check every active item of a tenant against its reorder point.
        
        Args:
            tenant_id: Tenant whose catalog is swept
            
        Returns:
            Dictionary with reorder signals, evaluated count and failed items
        """
        logger.info(f"Starting reorder point check for tenant: {tenant_id}")
        
        items = self._active_items(tenant_id).order_by(InventoryItem.id).all()
        result = run_sweep(items)
        
        logger.info(
            f"Reorder point check complete for tenant {tenant_id}: "
            f"{len(result['signals'])} of {result['evaluated']} items at or below ROP, "
            f"{len(result['failed_items'])} failed"
        )
        
        result['tenant_id'] = tenant_id
        result['success'] = True
        return result
    
    def get_items_below_reorder_point(self, tenant_id: str) -> List[InventoryItem]:
        """Get items with current stock at or below their reorder point, highest ROP first."""
        return (
            self._active_items(tenant_id)
            .filter(
                InventoryItem.reorder_point.isnot(None),
                InventoryItem.current_stock <= InventoryItem.reorder_point
            )
            .order_by(InventoryItem.reorder_point.desc(), InventoryItem.id)
            .all()
        )
