from .item_service import ItemService
from .analytics_service import DemandAnalyticsService
from .abc_service import ABCAnalysisService
from .reorder_service import ReorderService
from .reporting_service import ReportingService

__all__ = [
    'ItemService',
    'DemandAnalyticsService',
    'ABCAnalysisService',
    'ReorderService',
    'ReportingService'
]
