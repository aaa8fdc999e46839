# inventory_optimization/services/abc_service.py
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, List, Optional
import logging
import threading
import zlib

from sqlalchemy import text
from sqlalchemy.orm import Session

from inventory_optimization.config import config
from inventory_optimization.models import InventoryItem, ABCClassification
from inventory_optimization.core.abc_classification import classify_by_value
from inventory_optimization.exceptions import ClassificationError

logger = logging.getLogger(__name__)

_tenant_locks = defaultdict(threading.Lock)
_tenant_locks_guard = threading.Lock()

@contextmanager
def tenant_lock(tenant_id: str):
    """Serialize classification runs for one tenant within this process."""
    with _tenant_locks_guard:
        lock = _tenant_locks[tenant_id]
    with lock:
        yield

def advisory_lock_key(tenant_id: str) -> int:
    """Stable signed 32-bit key for a tenant's advisory lock."""
    key = zlib.crc32(f"abc_analysis:{tenant_id}".encode('utf-8'))
    return key - (1 << 32) if key >= (1 << 31) else key


class ABCAnalysisService:
    """Service running the catalog-wide ABC classification for a tenant.
    
    A run reads a snapshot of the tenant's active items, classifies them in
    memory and writes every classification back in one transaction.
    """
    
    def __init__(self, session: Session):
        """Initialize the ABC analysis service.
        
        Args:
            session: Database session
        """
        self.session = session
        rules = config.business_rules
        self.a_threshold = rules['abc_a_threshold']
        self.b_threshold = rules['abc_b_threshold']
    
    def _acquire_advisory_lock(self, tenant_id: str):
        # Serializes runs across processes; released when the transaction ends
        if self.session.get_bind().dialect.name == 'postgresql':
            self.session.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {'key': advisory_lock_key(tenant_id)}
            )
    
    def _snapshot(self, tenant_id: str) -> List[InventoryItem]:
        return (
            self.session.query(InventoryItem)
            .filter(
                InventoryItem.tenant_id == tenant_id,
                InventoryItem.deleted_at.is_(None)
            )
            .order_by(InventoryItem.id)
            .all()
        )
    
    def run_abc_analysis(self, tenant_id: str) -> Dict:
        """Classify every eligible item of a tenant as A, B or C.
        
        Items lacking annual demand or unit price are left unclassified. When
        the total annual value is zero nothing is written and the previous
        classifications stay as they were.
        
        Args:
            tenant_id: Tenant whose catalog is classified
            
        Returns:
            Dictionary with success flag, counts and one row per classified item
        """
        logger.info(f"Starting ABC analysis for tenant: {tenant_id}")
        
        with tenant_lock(tenant_id):
            try:
                self._acquire_advisory_lock(tenant_id)
                items = self._snapshot(tenant_id)
                
                if not items:
                    logger.warning(f"No inventory items found for tenant: {tenant_id}")
                    self.session.rollback()
                    return self._no_op(tenant_id, 'No inventory items found')
                
                eligible = {
                    item.id: item for item in items
                    if item.annual_demand is not None and item.unit_price is not None
                }
                ranked = classify_by_value(
                    [(item_id, item.annual_value()) for item_id, item in eligible.items()],
                    self.a_threshold,
                    self.b_threshold
                )
                
                if ranked is None:
                    logger.warning(f"Total inventory value is zero for tenant: {tenant_id}")
                    self.session.rollback()
                    return self._no_op(tenant_id, 'Total inventory value is zero')
                
                rows = []
                assigned = {}
                for entry in ranked:
                    item = eligible[entry['key']]
                    rows.append(self._build_row(item, entry))
                    assigned[item.id] = entry['classification']
                
                for item in items:
                    item.abc_classification = assigned.get(item.id)
                
                self.session.commit()
            
            except ClassificationError:
                self.session.rollback()
                raise
            except Exception as e:
                self.session.rollback()
                raise ClassificationError(f"ABC analysis failed for tenant {tenant_id}: {str(e)}")
        
        changed = sum(1 for row in rows if row['classification_changed'])
        counts = {cls.value: 0 for cls in ABCClassification}
        for row in rows:
            counts[row['classification']] += 1
        
        logger.info(
            f"ABC analysis completed for tenant {tenant_id}: {len(rows)} items classified "
            f"(A={counts['A']}, B={counts['B']}, C={counts['C']}, changed={changed})"
        )
        
        return {
            'success': True,
            'tenant_id': tenant_id,
            'classified_items': len(rows),
            'unclassified_items': len(items) - len(rows),
            'changed_items': changed,
            'class_counts': counts,
            'items': rows
        }
    
    @staticmethod
    def _no_op(tenant_id: str, reason: str) -> Dict:
        return {
            'success': False,
            'tenant_id': tenant_id,
            'reason': reason,
            'classified_items': 0,
            'items': []
        }
    
    @staticmethod
    def _build_row(item: InventoryItem, entry: Dict) -> Dict:
        classification = entry['classification']
        previous: Optional[ABCClassification] = item.abc_classification
        
        return {
            'item_id': item.id,
            'item_name': item.item_name,
            'annual_demand': item.annual_demand,
            'unit_price': float(item.unit_price),
            'annual_value': float(entry['annual_value']),
            'cumulative_value': float(entry['cumulative_value']),
            'cumulative_percentage': entry['cumulative_percentage'],
            'rank': entry['rank'],
            'classification': classification.value,
            'recommended_control_strategy': classification.control_strategy,
            'recommended_review_frequency': classification.review_frequency,
            'recommended_service_level': classification.recommended_service_level,
            'previous_classification': previous.value if previous else None,
            'classification_changed': previous != classification
        }
