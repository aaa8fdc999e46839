"""Shared helpers for tests backed by an in-memory SQLite database."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from inventory_optimization.models import Base

TENANT = 'clinic-001'
OTHER_TENANT = 'clinic-002'

# D=365 gives a daily demand of exactly 1 unit
STANDARD_ITEM = {
    'current_stock': 20,
    'unit_price': 10,
    'annual_demand': 365,
    'ordering_cost': 50,
    'holding_cost': 2,
    'lead_time_days': 7,
    'demand_std_dev': 0.5,
    'service_level': 0.95
}

def make_session():
    """Create a session on a fresh in-memory database."""
    engine = create_engine('sqlite://')
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)()

def item_params(**overrides):
    params = dict(STANDARD_ITEM)
    params.update(overrides)
    return params
