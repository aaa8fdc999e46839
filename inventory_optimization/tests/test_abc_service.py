"""
Unit tests for the ABC analysis service.
"""
import unittest
from datetime import datetime
from unittest.mock import MagicMock

from inventory_optimization.models import InventoryItem, ABCClassification
from inventory_optimization.services.item_service import ItemService
from inventory_optimization.services.abc_service import ABCAnalysisService, advisory_lock_key
from inventory_optimization.exceptions import ClassificationError
from inventory_optimization.tests.fixtures import make_session, item_params, TENANT, OTHER_TENANT

class TestABCAnalysisService(unittest.TestCase):
    """Test cases for catalog-wide classification runs."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.session = make_session()
        self.items = ItemService(self.session)
        self.service = ABCAnalysisService(self.session)
        
        self.high = self.items.create_item(TENANT, 'Insulin pens', **item_params(annual_demand=700, unit_price=1))
        self.medium = self.items.create_item(TENANT, 'Test strips', **item_params(annual_demand=200, unit_price=1))
        self.low = self.items.create_item(TENANT, 'Cotton swabs', **item_params(annual_demand=100, unit_price=1))
    
    def tearDown(self):
        self.session.close()
    
    def _classification(self, item_id):
        self.session.expire_all()
        return self.session.get(InventoryItem, item_id).abc_classification
    
    def test_run_classifies_items(self):
        """Test a run over three items at the exact boundaries."""
        result = self.service.run_abc_analysis(TENANT)
        
        self.assertTrue(result['success'])
        self.assertEqual(result['classified_items'], 3)
        self.assertEqual(result['class_counts'], {'A': 1, 'B': 1, 'C': 1})
        self.assertEqual([row['item_id'] for row in result['items']], [self.high.id, self.medium.id, self.low.id])
        
        self.assertEqual(self._classification(self.high.id), ABCClassification.A)
        self.assertEqual(self._classification(self.medium.id), ABCClassification.B)
        self.assertEqual(self._classification(self.low.id), ABCClassification.C)
    
    def test_report_rows(self):
        """Test the ranking details reported per item."""
        rows = self.service.run_abc_analysis(TENANT)['items']
        first = rows[0]
        
        self.assertEqual(first['rank'], 1)
        self.assertAlmostEqual(first['annual_value'], 700.0)
        self.assertAlmostEqual(first['cumulative_percentage'], 0.7)
        self.assertEqual(first['recommended_service_level'], 0.95)
        self.assertIsNone(first['previous_classification'])
        self.assertTrue(first['classification_changed'])
    
    def test_rerun_is_idempotent(self):
        """Test that an unchanged catalog keeps its classes."""
        self.service.run_abc_analysis(TENANT)
        result = self.service.run_abc_analysis(TENANT)
        
        self.assertEqual(result['changed_items'], 0)
        self.assertEqual(result['items'][0]['previous_classification'], 'A')
    
    def test_ineligible_items_are_cleared(self):
        """Test that an item without price loses a stale class."""
        stale = self.items.create_item(TENANT, 'Loose item', **item_params(unit_price=None))
        stale.abc_classification = ABCClassification.A
        self.session.commit()
        
        result = self.service.run_abc_analysis(TENANT)
        
        self.assertEqual(result['unclassified_items'], 1)
        self.assertIsNone(self._classification(stale.id))
    
    def test_soft_deleted_items_ignored(self):
        """Test that soft-deleted items are not ranked."""
        self.low.deleted_at = datetime(2024, 1, 1)
        self.session.commit()
        
        result = self.service.run_abc_analysis(TENANT)
        
        self.assertEqual(result['classified_items'], 2)
        self.assertIsNone(self._classification(self.low.id))
    
    def test_zero_total_value_is_no_op(self):
        """Test that a catalog without value keeps previous classes."""
        self.service.run_abc_analysis(TENANT)
        for item in (self.high, self.medium, self.low):
            self.items.update_parameters(item.id, TENANT, annual_demand=0)
        
        result = self.service.run_abc_analysis(TENANT)
        
        self.assertFalse(result['success'])
        self.assertEqual(result['classified_items'], 0)
        self.assertEqual(self._classification(self.high.id), ABCClassification.A)
        self.assertEqual(self._classification(self.low.id), ABCClassification.C)
    
    def test_empty_tenant(self):
        """Test a tenant without items."""
        result = self.service.run_abc_analysis(OTHER_TENANT)
        self.assertFalse(result['success'])
        self.assertEqual(result['items'], [])
    
    def test_single_item_is_class_c(self):
        """Test a tenant with one valued item."""
        lone = self.items.create_item(OTHER_TENANT, 'Lone item', **item_params())
        
        self.service.run_abc_analysis(OTHER_TENANT)
        
        self.assertEqual(self._classification(lone.id), ABCClassification.C)
    
    def test_unexpected_error_rolls_back(self):
        """Test that a failure mid-run is wrapped and nothing is written."""
        session = MagicMock()
        session.get_bind.return_value.dialect.name = 'sqlite'
        session.query.side_effect = RuntimeError('connection lost')
        
        with self.assertRaises(ClassificationError):
            ABCAnalysisService(session).run_abc_analysis(TENANT)
        
        session.rollback.assert_called_once()
        session.commit.assert_not_called()
    
    def test_advisory_lock_key(self):
        """Test that lock keys are stable signed 32-bit integers."""
        key = advisory_lock_key(TENANT)
        
        self.assertEqual(key, advisory_lock_key(TENANT))
        self.assertNotEqual(key, advisory_lock_key(OTHER_TENANT))
        self.assertTrue(-2 ** 31 <= key < 2 ** 31)

if __name__ == '__main__':
    unittest.main()
