# inventory_optimization/batch/reorder_sweep_job.py
import logging
from typing import Dict, Optional

from inventory_optimization.db import session_scope
from inventory_optimization.services.item_service import ItemService
from inventory_optimization.services.reorder_service import ReorderService
from inventory_optimization.config import config
from inventory_optimization.logging_setup import logger as log_manager, get_logger, log_exception

logger = get_logger('reorder_sweep_job')
logger.setLevel(logging.INFO)

def run_reorder_sweep_job(tenant_id: Optional[str] = None) -> Dict:
    """Run the daily reorder point sweep.
    
    Args:
        tenant_id: Optional tenant (if not provided, sweeps every tenant)
        
    Returns:
        Dictionary with per-tenant sweep results
    """
    log_info = log_manager.batch_start_log('reorder_sweep', {
        'tenant_id': tenant_id,
        'scheduled_time': config.batch_config['reorder_sweep_time']
    })
    results = {}
    total_signals = 0
    
    try:
        with session_scope() as session:
            tenant_ids = [tenant_id] if tenant_id else ItemService(session).get_tenant_ids()
            reorder_service = ReorderService(session)
            
            for tenant in tenant_ids:
                try:
                    results[tenant] = reorder_service.run_reorder_sweep(tenant)
                    total_signals += len(results[tenant]['signals'])
                except Exception as e:
                    logger.exception(f"Reorder sweep failed for tenant {tenant}: {e}")
                    results[tenant] = {'success': False, 'error': str(e)}
        
        success = all(result.get('success', False) for result in results.values())
        duration = log_manager.batch_end_log(
            log_info, success, {'tenants': len(results), 'reorder_signals': total_signals}
        )
        
        return {
            'success': success,
            'duration': str(duration),
            'reorder_signals': total_signals,
            'tenants': results
        }
    
    except Exception as e:
        log_exception('reorder_sweep_job', e, "Error running reorder sweep")
        log_manager.batch_end_log(log_info, False, {'error': str(e)})
        return {
            'success': False,
            'error': str(e),
            'tenants': results
        }
