# inventory_optimization/models.py
from decimal import Decimal

from sqlalchemy import (
    Column, Integer, String, Float, Numeric, Date, DateTime, ForeignKey,
    Enum, Index, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import enum

Base = declarative_base()

class ABCClassification(enum.Enum):
    """Pareto control tier of a catalog item.
    
    Values:
        A: High value items, top 70% of cumulative annual value (tight control)
        B: Medium value items, next 20% (moderate control)
        C: Low value items, remaining 10% (loose control)
    
    Ordering and metadata come from the explicit tables below, never from
    declaration order.
    """
    A = 'A'
    B = 'B'
    C = 'C'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @property
    def rank(self) -> int:
        return _ABC_RANK[self.value]

    def __lt__(self, other):
        if not isinstance(other, ABCClassification):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ABCClassification):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, ABCClassification):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, ABCClassification):
            return NotImplemented
        return self.rank >= other.rank

    @property
    def description(self) -> str:
        return _ABC_PROFILE[self.value]['description']

    @property
    def value_percentage(self) -> float:
        return _ABC_PROFILE[self.value]['value_percentage']

    @property
    def recommended_service_level(self) -> float:
        return _ABC_PROFILE[self.value]['recommended_service_level']

    @property
    def control_strategy(self) -> str:
        return _ABC_PROFILE[self.value]['control_strategy']

    @property
    def review_frequency(self) -> str:
        return _ABC_PROFILE[self.value]['review_frequency']

    @classmethod
    def from_string(cls, value: str) -> 'ABCClassification':
        """Create an ABCClassification from a string value.
        
        Args:
            value: String value ('A', 'B', 'C'), case insensitive
            
        Returns:
            ABCClassification enum value
            
        Raises:
            ValueError if the string value is not valid
        """
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid ABC classification: {value}. Valid values are: A, B, C")


_ABC_RANK = {'A': 1, 'B': 2, 'C': 3}

_ABC_PROFILE = {
    'A': {
        'description': 'High Value',
        'value_percentage': 70.0,
        'recommended_service_level': 0.95,
        'control_strategy': 'Tight control: exact records, frequent orders',
        'review_frequency': 'Daily'
    },
    'B': {
        'description': 'Medium Value',
        'value_percentage': 20.0,
        'recommended_service_level': 0.90,
        'control_strategy': 'Moderate control: standard procedures, periodic orders',
        'review_frequency': 'Weekly'
    },
    'C': {
        'description': 'Low Value',
        'value_percentage': 10.0,
        'recommended_service_level': 0.75,
        'control_strategy': 'Loose control: simplified procedures, bulk orders',
        'review_frequency': 'Monthly'
    }
}


class DemandStability(enum.Enum):
    STABLE = 'STABLE'
    MODERATE = 'MODERATE'
    HIGHLY_VARIABLE = 'HIGHLY_VARIABLE'

    def __str__(self):
        return self.value


class InventoryItem(Base):
    """Catalog entry holding cost and lead-time inputs plus the engine's derived fields.
    
    Derived fields (economic_order_quantity, reorder_point, safety_stock,
    abc_classification) are written only by the engine.
    """
    __tablename__ = 'inventory_item'
    __table_args__ = (
        CheckConstraint('current_stock >= 0', name='ck_item_current_stock'),
        CheckConstraint('unit_price IS NULL OR unit_price >= 0', name='ck_item_unit_price'),
        CheckConstraint('annual_demand IS NULL OR annual_demand >= 0', name='ck_item_annual_demand'),
        CheckConstraint('ordering_cost IS NULL OR ordering_cost >= 0', name='ck_item_ordering_cost'),
        CheckConstraint('holding_cost IS NULL OR holding_cost >= 0', name='ck_item_holding_cost'),
        CheckConstraint('lead_time_days IS NULL OR lead_time_days >= 0', name='ck_item_lead_time'),
        CheckConstraint('demand_std_dev IS NULL OR demand_std_dev >= 0', name='ck_item_demand_std_dev'),
        CheckConstraint(
            'service_level IS NULL OR (service_level >= 0.0 AND service_level <= 1.0)',
            name='ck_item_service_level'
        ),
        CheckConstraint('eoq IS NULL OR eoq > 0', name='ck_item_eoq'),
        CheckConstraint('reorder_point IS NULL OR reorder_point >= 0', name='ck_item_reorder_point'),
        CheckConstraint('safety_stock IS NULL OR safety_stock >= 0', name='ck_item_safety_stock'),
        CheckConstraint(
            "abc_classification IS NULL OR abc_classification IN ('A', 'B', 'C')",
            name='ck_item_abc_classification'
        ),
        Index('idx_inventory_item_tenant', 'tenant_id'),
        Index('idx_inventory_item_eoq', 'eoq'),
        Index('idx_inventory_item_reorder_point', 'reorder_point'),
        Index('idx_inventory_item_abc', 'abc_classification'),
    )
    
    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(36), nullable=False)
    item_code = Column(String(100))
    item_name = Column(String(255), nullable=False)
    
    # Stocking state
    current_stock = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(10, 2))
    
    # EOQ inputs: D (units/year), S (per order), H (per unit per year)
    annual_demand = Column(Float)
    ordering_cost = Column(Numeric(10, 2))
    holding_cost = Column(Numeric(10, 2))
    
    # ROP inputs: L (days), sigma (daily demand std dev), alpha (0.0-1.0)
    lead_time_days = Column(Integer)
    demand_std_dev = Column(Float)
    service_level = Column(Float)
    
    # Derived fields
    economic_order_quantity = Column('eoq', Float)
    reorder_point = Column(Integer)
    safety_stock = Column(Integer)
    abc_classification = Column(
        Enum(ABCClassification, name='abc_classification_type', native_enum=False, length=1)
    )
    
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime)
    
    samples = relationship(
        "DemandPeriodSample",
        back_populates="item",
        order_by="DemandPeriodSample.period_start.desc()"
    )
    
    def annual_value(self):
        """Annual consumption value (annual_demand x unit_price), None when either is unset."""
        if self.annual_demand is None or self.unit_price is None:
            return None
        return Decimal(str(self.annual_demand)) * Decimal(str(self.unit_price))
    
    def is_below_reorder_point(self) -> bool:
        if self.reorder_point is None:
            return False
        return self.current_stock <= self.reorder_point
    
    def __repr__(self):
        return f"<InventoryItem id={self.id} code={self.item_code!r} tenant={self.tenant_id!r}>"


class DemandPeriodSample(Base):
    """Immutable demand statistics for one item over an inclusive date window."""
    __tablename__ = 'demand_period_sample'
    __table_args__ = (
        CheckConstraint('period_end >= period_start', name='ck_sample_period_ordering'),
        CheckConstraint('total_demand >= 0', name='ck_sample_total_demand'),
        CheckConstraint('avg_daily_demand >= 0', name='ck_sample_avg_daily_demand'),
        CheckConstraint('demand_std_dev >= 0', name='ck_sample_demand_std_dev'),
        CheckConstraint(
            'min_daily_demand IS NULL OR max_daily_demand IS NULL OR min_daily_demand <= max_daily_demand',
            name='ck_sample_min_max_demand'
        ),
        Index('idx_demand_sample_tenant', 'tenant_id', 'deleted_at'),
        Index('idx_demand_sample_item', 'item_id', 'period_start'),
        Index('idx_demand_sample_period', 'period_start', 'period_end'),
    )
    
    id = Column(Integer, primary_key=True)
    tenant_id = Column(String(36), nullable=False)
    item_id = Column(Integer, ForeignKey('inventory_item.id'), nullable=False)
    
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    
    total_demand = Column(Integer, nullable=False)
    avg_daily_demand = Column(Float, nullable=False)
    demand_std_dev = Column(Float, nullable=False)
    min_daily_demand = Column(Integer)
    max_daily_demand = Column(Integer)
    
    created_at = Column(DateTime, default=func.now())
    deleted_at = Column(DateTime)
    
    item = relationship("InventoryItem", back_populates="samples")
    
    @property
    def period_days(self) -> int:
        """Number of calendar days in the window, both ends included."""
        return (self.period_end - self.period_start).days + 1
    
    def __repr__(self):
        return (f"<DemandPeriodSample item={self.item_id} "
                f"{self.period_start}..{self.period_end} total={self.total_demand}>")
