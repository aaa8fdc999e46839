# inventory_optimization/services/item_service.py
from decimal import Decimal
from typing import List, Dict, Optional, Any
import logging

from sqlalchemy.orm import Session

from inventory_optimization.config import config
from inventory_optimization.models import InventoryItem
from inventory_optimization.core.reorder_parameters import (
    INPUT_FIELDS, DERIVED_FIELDS, item_inputs, compute_derived_fields, recompute_derived_fields
)
from inventory_optimization.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MONEY_FIELDS = ('unit_price', 'ordering_cost', 'holding_cost')
INTEGER_FIELDS = ('current_stock', 'lead_time_days')
DESCRIPTIVE_FIELDS = ('item_name', 'item_code')


class ItemService:
    """Service for reading and writing inventory item parameters.
    
    Every write goes through recompute_derived_fields so the derived fields
    always match the stored inputs.
    """
    
    def __init__(self, session: Session):
        """Initialize the item service.
        
        Args:
            session: Database session
        """
        self.session = session
        self.days_per_year = config.business_rules['days_per_year']
    
    def _active_query(self, tenant_id: Optional[str] = None):
        query = self.session.query(InventoryItem).filter(InventoryItem.deleted_at.is_(None))
        if tenant_id is not None:
            query = query.filter(InventoryItem.tenant_id == tenant_id)
        return query
    
    def get_item(self, item_id: int, tenant_id: Optional[str] = None) -> Optional[InventoryItem]:
        """Get an active item by ID.
        
        Args:
            item_id: Item ID
            tenant_id: Optional tenant scope
            
        Returns:
            Item object or None if not found
        """
        return self._active_query(tenant_id).filter(InventoryItem.id == item_id).first()
    
    def require_item(self, item_id: int, tenant_id: Optional[str] = None) -> InventoryItem:
        """Get an active item by ID, raising NotFoundError if it does not exist."""
        item = self.get_item(item_id, tenant_id)
        if not item:
            raise NotFoundError(f"Item with ID {item_id} not found", code='ITEM_NOT_FOUND')
        return item
    
    def get_items(self, tenant_id: Optional[str] = None) -> List[InventoryItem]:
        """Get all active items, optionally for one tenant, ordered by ID."""
        return self._active_query(tenant_id).order_by(InventoryItem.id).all()
    
    def get_tenant_ids(self) -> List[str]:
        """Get the distinct tenants that own active items."""
        rows = (
            self.session.query(InventoryItem.tenant_id)
            .filter(InventoryItem.deleted_at.is_(None))
            .distinct()
            .order_by(InventoryItem.tenant_id)
            .all()
        )
        return [row[0] for row in rows]
    
    @staticmethod
    def check_writable(params: Dict[str, Any]):
        """Reject keys that are not writable item parameters, before they reach keyword arguments."""
        errors = {}
        for field in params:
            if field in DERIVED_FIELDS or field == 'abc_classification':
                errors[field] = f'{field} is computed by the engine and cannot be set directly'
            elif field not in INPUT_FIELDS and field not in DESCRIPTIVE_FIELDS:
                errors[field] = f'Unknown inventory parameter: {field}'
        if errors:
            raise ValidationError("Invalid inventory parameters", code='INVALID_DATA', details=errors)
    
    @staticmethod
    def _coerce(field: str, value: Any) -> Any:
        if value is None or field in DESCRIPTIVE_FIELDS:
            return value
        if field in MONEY_FIELDS:
            return Decimal(str(value))
        if field in INTEGER_FIELDS:
            return int(float(value))
        return float(value)
    
    def create_item(
        self,
        tenant_id: str,
        item_name: str,
        item_code: Optional[str] = None,
        **params
    ) -> InventoryItem:
        """Create an item and compute its derived fields.
        
        Args:
            tenant_id: Owning tenant
            item_name: Display name
            item_code: Optional catalog code
            **params: Any of the item input fields
            
        Returns:
            The new item
        """
        if not item_name:
            raise ValidationError(
                "Invalid inventory parameters", code='INVALID_DATA',
                details={'item_name': 'item_name is required'}
            )
        
        params.setdefault('current_stock', 0)
        self.check_writable(params)
        compute_derived_fields(params, self.days_per_year)
        
        item = InventoryItem(tenant_id=tenant_id, item_name=item_name, item_code=item_code)
        for field, value in params.items():
            setattr(item, field, self._coerce(field, value))
        recompute_derived_fields(item, self.days_per_year)
        
        self.session.add(item)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        
        logger.info(f"Created item {item.id} ({item_name}) for tenant {tenant_id}")
        return item
    
    def update_parameters(
        self,
        item_id: int,
        tenant_id: Optional[str] = None,
        **params
    ) -> InventoryItem:
        """Apply a parameter change to an item and recompute its derived fields.
        
        The merged inputs are validated before anything is assigned; an invalid
        change is refused entirely and leaves the item untouched.
        
        Args:
            item_id: Item ID
            tenant_id: Optional tenant scope
            **params: Input fields to change (None clears a field)
            
        Returns:
            The updated item
        """
        item = self.require_item(item_id, tenant_id)
        self.check_writable(params)
        
        merged = item_inputs(item)
        merged.update({k: v for k, v in params.items() if k in INPUT_FIELDS})
        compute_derived_fields(merged, self.days_per_year)
        
        for field, value in params.items():
            setattr(item, field, self._coerce(field, value))
        recompute_derived_fields(item, self.days_per_year)
        
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        
        logger.debug(
            f"Recomputed item {item.id}: EOQ={item.economic_order_quantity}, "
            f"SS={item.safety_stock}, ROP={item.reorder_point}"
        )
        return item
    
    def update_stock(self, item_id: int, current_stock: int, tenant_id: Optional[str] = None) -> InventoryItem:
        """Set the current stock figure of an item."""
        return self.update_parameters(item_id, tenant_id, current_stock=current_stock)
