"""
Unit tests for the item service.
"""
import unittest
from decimal import Decimal

from inventory_optimization.models import InventoryItem, ABCClassification
from inventory_optimization.services.item_service import ItemService
from inventory_optimization.exceptions import ValidationError, NotFoundError
from inventory_optimization.tests.fixtures import make_session, item_params, TENANT, OTHER_TENANT

class TestItemService(unittest.TestCase):
    """Test cases for item reads and parameter writes."""
    
    def setUp(self):
        """Set up test fixtures."""
        self.session = make_session()
        self.service = ItemService(self.session)
        self.item = self.service.create_item(TENANT, 'Nitrile gloves (M)', 'GLV-M', **item_params())
    
    def tearDown(self):
        self.session.close()
    
    def test_create_item_computes_derived_fields(self):
        """Test that a new item is stored with its derived fields."""
        self.assertIsNotNone(self.item.id)
        self.assertAlmostEqual(self.item.economic_order_quantity, 135.09, places=2)
        self.assertEqual(self.item.safety_stock, 3)
        self.assertEqual(self.item.reorder_point, 10)
        self.assertEqual(self.item.unit_price, Decimal('10'))
        self.assertIsNone(self.item.abc_classification)
    
    def test_create_item_without_inputs(self):
        """Test that an item without inputs is stored without derived fields."""
        item = self.service.create_item(TENANT, 'Gauze pads')
        
        self.assertEqual(item.current_stock, 0)
        self.assertIsNone(item.economic_order_quantity)
        self.assertIsNone(item.reorder_point)
    
    def test_create_item_requires_name(self):
        """Test that the item name is required."""
        with self.assertRaises(ValidationError):
            self.service.create_item(TENANT, '')
    
    def test_update_recomputes(self):
        """Test that a longer lead time raises the reorder point."""
        item = self.service.update_parameters(self.item.id, TENANT, lead_time_days=14)
        
        # 1.645 * 0.5 * sqrt(14) = 3.08 -> 4; lead time demand 14
        self.assertEqual(item.safety_stock, 4)
        self.assertEqual(item.reorder_point, 18)
        self.assertAlmostEqual(item.economic_order_quantity, 135.09, places=2)
    
    def test_invalid_update_is_refused(self):
        """Test that an invalid service level leaves the item untouched."""
        with self.assertRaises(ValidationError) as context:
            self.service.update_parameters(self.item.id, TENANT, service_level=1.5, lead_time_days=14)
        
        self.assertIn('service_level', context.exception.details)
        
        self.session.expire_all()
        stored = self.session.get(InventoryItem, self.item.id)
        self.assertEqual(stored.service_level, 0.95)
        self.assertEqual(stored.lead_time_days, 7)
        self.assertEqual(stored.reorder_point, 10)
    
    def test_clearing_demand_clears_derived_fields(self):
        """Test that removing annual demand unsets every derived field."""
        self.item.abc_classification = ABCClassification.A
        self.session.commit()
        
        item = self.service.update_parameters(self.item.id, TENANT, annual_demand=None)
        
        self.assertIsNone(item.economic_order_quantity)
        self.assertIsNone(item.safety_stock)
        self.assertIsNone(item.reorder_point)
        self.assertIsNone(item.abc_classification)
    
    def test_derived_fields_not_writable(self):
        """Test that derived fields cannot be set directly."""
        with self.assertRaises(ValidationError) as context:
            self.service.update_parameters(self.item.id, TENANT, reorder_point=1)
        self.assertIn('reorder_point', context.exception.details)
        
        with self.assertRaises(ValidationError):
            self.service.update_parameters(self.item.id, TENANT, abc_classification='A')
    
    def test_unknown_field_rejected(self):
        """Test that unknown parameters are rejected."""
        with self.assertRaises(ValidationError) as context:
            self.service.update_parameters(self.item.id, TENANT, colour='blue')
        self.assertIn('colour', context.exception.details)
    
    def test_identity_keys_not_writable(self):
        """Test that item_id and tenant_id are refused before keyword unpacking."""
        with self.assertRaises(ValidationError) as context:
            ItemService.check_writable({'item_id': 1, 'tenant_id': OTHER_TENANT, 'lead_time_days': 3})
        self.assertEqual(set(context.exception.details), {'item_id', 'tenant_id'})
        
        ItemService.check_writable({'lead_time_days': 3, 'item_name': 'Gloves'})
    
    def test_update_stock(self):
        """Test setting the current stock."""
        item = self.service.update_stock(self.item.id, 4, TENANT)
        
        self.assertEqual(item.current_stock, 4)
        self.assertTrue(item.is_below_reorder_point())
    
    def test_tenant_scope(self):
        """Test that items are invisible to other tenants."""
        self.assertIsNone(self.service.get_item(self.item.id, OTHER_TENANT))
        with self.assertRaises(NotFoundError):
            self.service.update_parameters(self.item.id, OTHER_TENANT, lead_time_days=3)
    
    def test_get_items_and_tenants(self):
        """Test listing items and tenants."""
        self.service.create_item(OTHER_TENANT, 'Syringes 5ml', **item_params())
        
        self.assertEqual([i.id for i in self.service.get_items(TENANT)], [self.item.id])
        self.assertEqual(len(self.service.get_items()), 2)
        self.assertEqual(self.service.get_tenant_ids(), [TENANT, OTHER_TENANT])

if __name__ == '__main__':
    unittest.main()
