#!/usr/bin/env python
# create_db_tables.py - Script to create the inventory optimization tables

import sys
import logging
import argparse

from inventory_optimization.db import db
from inventory_optimization.logging_setup import get_logger

def create_tables(drop_existing=False, database_url=None):
    """Create database tables.
    
    Args:
        drop_existing: If True, drop existing tables before creating new ones
        database_url: Optional database URL overriding the configuration
        
    Returns:
        True if tables were created successfully
    """
    logger = get_logger('create_tables')
    logger.info("Initializing database connection...")
    
    try:
        db.initialize(database_url)
        
        if drop_existing:
            logger.info("Dropping existing tables...")
            db.drop_all_tables()
            logger.info("Existing tables dropped successfully.")
        
        logger.info("Creating database tables...")
        db.create_all_tables()
        logger.info("Database tables created successfully.")
        
        return True
    
    except Exception as e:
        logger.exception(f"Error creating database tables: {str(e)}")
        return False

def main():
    """Create database tables."""
    parser = argparse.ArgumentParser(description='Create inventory optimization database tables')
    parser.add_argument('--drop', '-d', action='store_true', help='Drop existing tables before creating new ones')
    parser.add_argument('--database-url', help='Override the configured database URL')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    
    args = parser.parse_args()
    
    if args.verbose:
        get_logger('create_tables').setLevel(logging.DEBUG)
    
    return 0 if create_tables(args.drop, args.database_url) else 1

if __name__ == "__main__":
    sys.exit(main())
