#!/usr/bin/env python
# run_reorder_sweep.py - Script to run the daily reorder point sweep

import sys
import logging
import argparse

from inventory_optimization.batch.reorder_sweep_job import run_reorder_sweep_job
from inventory_optimization.db import db
from inventory_optimization.logging_setup import get_logger

def main():
    """Run the reorder sweep."""
    parser = argparse.ArgumentParser(description='Run the daily reorder point sweep')
    parser.add_argument('--tenant', '-t', help='Process only a specific tenant ID')
    parser.add_argument('--database-url', help='Override the configured database URL')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    
    args = parser.parse_args()
    
    logger = get_logger('reorder_sweep_runner')
    logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)
    
    logger.info("Starting reorder sweep runner...")
    logger.info(f"Tenant filter: {args.tenant if args.tenant else 'All tenants'}")
    
    try:
        db.initialize(args.database_url)
        results = run_reorder_sweep_job(args.tenant)
        
        if not results.get('success', False):
            logger.error(f"Reorder sweep failed: {results.get('error', 'see tenant results')}")
            return 1
        
        logger.info(f"Reorder sweep completed successfully in {results.get('duration')}")
        for tenant, tenant_result in results.get('tenants', {}).items():
            for signal in tenant_result.get('signals', []):
                logger.info(
                    f"[{tenant}] item {signal['item_id']} ({signal['item_name']}): "
                    f"stock {signal['current_stock']} <= ROP {signal['reorder_point']}, "
                    f"order {signal['recommended_order_qty'] if signal['recommended_order_qty'] is not None else 'n/a'}"
                )
        return 0
    
    except Exception as e:
        logger.exception(f"Error running reorder sweep: {str(e)}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
