"""
Unit tests for the demand analytics service.
"""
import unittest
from datetime import date

from inventory_optimization.services.item_service import ItemService
from inventory_optimization.services.analytics_service import DemandAnalyticsService
from inventory_optimization.exceptions import ValidationError, NotFoundError
from inventory_optimization.tests.fixtures import make_session, item_params, TENANT

class TestDemandAnalyticsService(unittest.TestCase):
    """Test cases for recording and applying demand statistics."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.session = make_session()
        self.items = ItemService(self.session)
        self.service = DemandAnalyticsService(self.session)
        self.item = self.items.create_item(TENANT, 'Saline 500ml', **item_params())
    
    def tearDown(self):
        self.session.close()
    
    def test_record_daily_demand(self):
        """Test aggregating daily counts into a stored sample."""
        sample = self.service.record_daily_demand(
            self.item.id, [2, 4, 6], date(2024, 1, 1), date(2024, 1, 3), TENANT
        )
        
        self.assertIsNotNone(sample.id)
        self.assertEqual(sample.total_demand, 12)
        self.assertAlmostEqual(sample.avg_daily_demand, 6.0)
        self.assertAlmostEqual(sample.demand_std_dev, 2.0)
        self.assertEqual(sample.period_days, 3)
    
    def test_record_sample(self):
        """Test storing client-supplied aggregates."""
        sample = self.service.record_sample(
            self.item.id, date(2024, 1, 1), date(2024, 1, 31), 300, 10.0, 2.5, 3, 20, TENANT
        )
        self.assertEqual(sample.max_daily_demand, 20)
    
    def test_record_sample_rejects_inconsistent_average(self):
        """Test that an average far from total / days is refused and not stored."""
        with self.assertRaises(ValidationError) as context:
            self.service.record_sample(
                self.item.id, date(2024, 1, 1), date(2024, 1, 31), 300, 15.0, 2.5, tenant_id=TENANT
            )
        
        self.assertIn('avg_daily_demand', context.exception.details)
        self.assertEqual(self.service.get_sample_history(self.item.id, TENANT), [])
    
    def test_history_is_most_recent_first(self):
        """Test the ordering of the sample history."""
        self.service.record_daily_demand(self.item.id, [1, 1], date(2024, 1, 1), date(2024, 1, 2), TENANT)
        self.service.record_daily_demand(self.item.id, [3, 3], date(2024, 3, 1), date(2024, 3, 2), TENANT)
        self.service.record_daily_demand(self.item.id, [2, 2], date(2024, 2, 1), date(2024, 2, 2), TENANT)
        
        history = self.service.get_sample_history(self.item.id, TENANT)
        
        self.assertEqual([s.period_start.month for s in history], [3, 2, 1])
        self.assertEqual(self.service.get_latest_sample(self.item.id, TENANT).period_start, date(2024, 3, 1))
    
    def test_apply_sample_to_item(self):
        """Test feeding the latest sample into the item's demand fields."""
        self.service.record_daily_demand(
            self.item.id, [2, 4, 6], date(2024, 1, 1), date(2024, 1, 3), TENANT
        )
        
        item = self.service.apply_sample_to_item(self.item.id, tenant_id=TENANT)
        
        self.assertAlmostEqual(item.demand_std_dev, 2.0)
        self.assertAlmostEqual(item.annual_demand, 6.0 * 365)
        # d = 6, L = 7: ceil(42) + ceil(1.645 * 2 * sqrt(7)) = 42 + 9
        self.assertEqual(item.reorder_point, 51)
    
    def test_apply_sample_keeps_annual_demand(self):
        """Test applying only the standard deviation."""
        sample = self.service.record_daily_demand(
            self.item.id, [2, 4, 6], date(2024, 1, 1), date(2024, 1, 3), TENANT
        )
        
        item = self.service.apply_sample_to_item(self.item.id, sample, update_annual_demand=False, tenant_id=TENANT)
        
        self.assertEqual(item.annual_demand, 365)
        self.assertEqual(item.reorder_point, 7 + 9)
    
    def test_apply_without_sample(self):
        """Test that applying requires a recorded sample."""
        with self.assertRaises(NotFoundError) as context:
            self.service.apply_sample_to_item(self.item.id, tenant_id=TENANT)
        self.assertEqual(context.exception.code, 'SAMPLE_NOT_FOUND')
    
    def test_refresh_demand_statistics(self):
        """Test that a bad item is skipped and the rest refreshed."""
        other = self.items.create_item(TENANT, 'Bandages', **item_params())
        
        result = self.service.refresh_demand_statistics(
            TENANT,
            {self.item.id: [1, 2, 3], other.id: [1, -1], 9999: [1]},
            date(2024, 1, 1),
            date(2024, 1, 3)
        )
        
        self.assertFalse(result['success'])
        self.assertEqual(result['recorded_samples'], 1)
        self.assertEqual(result['updated_items'], 1)
        self.assertEqual(sorted(f['item_id'] for f in result['failed_items']), sorted([other.id, 9999]))

if __name__ == '__main__':
    unittest.main()
