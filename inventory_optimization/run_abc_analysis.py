#!/usr/bin/env python
# run_abc_analysis.py - Script to run the periodic ABC classification

import sys
import logging
import argparse

from inventory_optimization.batch.abc_analysis_job import run_abc_analysis_job
from inventory_optimization.db import db
from inventory_optimization.logging_setup import get_logger

def main():
    """Run the ABC analysis."""
    parser = argparse.ArgumentParser(description='Run ABC classification of the catalog')
    parser.add_argument('--tenant', '-t', help='Process only a specific tenant ID')
    parser.add_argument('--database-url', help='Override the configured database URL')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    
    args = parser.parse_args()
    
    logger = get_logger('abc_analysis_runner')
    logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)
    
    logger.info("Starting ABC analysis runner...")
    logger.info(f"Tenant filter: {args.tenant if args.tenant else 'All tenants'}")
    
    try:
        db.initialize(args.database_url)
        results = run_abc_analysis_job(args.tenant)
        
        for tenant, tenant_result in results.get('tenants', {}).items():
            if tenant_result.get('success'):
                logger.info(f"[{tenant}] classified {tenant_result['classified_items']} items: "
                            f"{tenant_result['class_counts']}")
            else:
                logger.warning(f"[{tenant}] not classified: "
                               f"{tenant_result.get('reason') or tenant_result.get('error')}")
        
        if not results.get('success', False):
            logger.error(f"ABC analysis failed: {results.get('error', 'see tenant results')}")
            return 1
        
        logger.info(f"ABC analysis completed in {results.get('duration')}")
        return 0
    
    except Exception as e:
        logger.exception(f"Error running ABC analysis: {str(e)}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
