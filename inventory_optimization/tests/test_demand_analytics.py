"""
Unit tests for demand analytics.
"""
import unittest
from datetime import date
from unittest.mock import MagicMock

from inventory_optimization.core.demand_analytics import (
    demand_days,
    average_matches_total,
    aggregate_daily_demand,
    coefficient_of_variation,
    classify_demand_stability,
    summarize_sample
)
from inventory_optimization.models import DemandStability
from inventory_optimization.exceptions import ValidationError

class TestDemandDays(unittest.TestCase):
    """Test cases for the average daily demand divisor."""
    
    def test_days_between_dates(self):
        """Test the divisor for a multi-day window."""
        self.assertEqual(demand_days(date(2024, 1, 1), date(2024, 1, 31)), 30)
    
    def test_single_day_window(self):
        """Test that a one-day window does not divide by zero."""
        self.assertEqual(demand_days(date(2024, 1, 1), date(2024, 1, 1)), 1)

class TestAverageTolerance(unittest.TestCase):
    """Test cases for checking a supplied average."""
    
    def test_within_tolerance(self):
        """Test averages within 1% of total / days."""
        self.assertTrue(average_matches_total(10.0, 300, 30, 0.01))
        self.assertTrue(average_matches_total(10.09, 300, 30, 0.01))
    
    def test_outside_tolerance(self):
        """Test averages too far from total / days."""
        self.assertFalse(average_matches_total(10.2, 300, 30, 0.01))
    
    def test_small_averages_use_unit_floor(self):
        """Test that averages below one are checked against an absolute floor."""
        self.assertTrue(average_matches_total(0.105, 3, 30, 0.01))
        self.assertFalse(average_matches_total(0.2, 3, 30, 0.01))

class TestAggregateDailyDemand(unittest.TestCase):
    """Test cases for aggregating daily consumption."""
    
    def test_aggregate(self):
        """Test statistics over a short window."""
        stats = aggregate_daily_demand([2, 4, 6], date(2024, 1, 1), date(2024, 1, 3))
        
        self.assertEqual(stats['days'], 2)
        self.assertEqual(stats['total_demand'], 12)
        self.assertAlmostEqual(stats['avg_daily_demand'], 6.0)
        self.assertAlmostEqual(stats['demand_std_dev'], 2.0)
        self.assertEqual(stats['min_daily_demand'], 2)
        self.assertEqual(stats['max_daily_demand'], 6)
    
    def test_single_count_has_zero_std_dev(self):
        """Test that one observation has no spread."""
        stats = aggregate_daily_demand([5], date(2024, 1, 1), date(2024, 1, 1))
        
        self.assertEqual(stats['demand_std_dev'], 0.0)
        self.assertAlmostEqual(stats['avg_daily_demand'], 5.0)
    
    def test_no_counts(self):
        """Test a window without consumption records."""
        stats = aggregate_daily_demand([], date(2024, 1, 1), date(2024, 1, 10))
        
        self.assertEqual(stats['total_demand'], 0)
        self.assertEqual(stats['avg_daily_demand'], 0.0)
        self.assertIsNone(stats['min_daily_demand'])
        self.assertIsNone(stats['max_daily_demand'])
    
    def test_reversed_period_rejected(self):
        """Test that the window must not end before it starts."""
        with self.assertRaises(ValidationError) as context:
            aggregate_daily_demand([1, 2], date(2024, 2, 1), date(2024, 1, 1))
        self.assertIn('period_start', context.exception.details)
    
    def test_invalid_counts_rejected(self):
        """Test that negative or fractional counts are rejected."""
        with self.assertRaises(ValidationError):
            aggregate_daily_demand([1, -2], date(2024, 1, 1), date(2024, 1, 2))
        with self.assertRaises(ValidationError):
            aggregate_daily_demand([1, 2.5], date(2024, 1, 1), date(2024, 1, 2))
        with self.assertRaises(ValidationError):
            aggregate_daily_demand([1, float('inf')], date(2024, 1, 1), date(2024, 1, 2))
    
    def test_count_must_cover_window(self):
        """Test that the counts must give one value per day of the window."""
        with self.assertRaises(ValidationError) as context:
            aggregate_daily_demand([1, 2, 3], date(2024, 1, 1), date(2024, 1, 30))
        self.assertIn('daily_counts', context.exception.details)
        
        with self.assertRaises(ValidationError):
            aggregate_daily_demand([1, 2, 3], date(2024, 1, 1), date(2024, 1, 2))

class TestDemandStability(unittest.TestCase):
    """Test cases for coefficient of variation and stability."""
    
    def test_coefficient_of_variation(self):
        """Test CV as sigma over mean."""
        self.assertAlmostEqual(coefficient_of_variation(2.0, 8.0), 0.25)
        self.assertIsNone(coefficient_of_variation(2.0, 0))
        self.assertIsNone(coefficient_of_variation(None, 8.0))
    
    def test_classify_demand_stability(self):
        """Test the stability bands and their boundaries."""
        self.assertEqual(classify_demand_stability(0.2), DemandStability.STABLE)
        self.assertEqual(classify_demand_stability(0.5), DemandStability.MODERATE)
        self.assertEqual(classify_demand_stability(0.99), DemandStability.MODERATE)
        self.assertEqual(classify_demand_stability(1.0), DemandStability.HIGHLY_VARIABLE)
        self.assertIsNone(classify_demand_stability(None))
    
    def test_summarize_sample(self):
        """Test the report built from a stored sample."""
        sample = MagicMock()
        sample.id = 11
        sample.item_id = 3
        sample.period_start = date(2024, 1, 1)
        sample.period_end = date(2024, 1, 31)
        sample.total_demand = 300
        sample.avg_daily_demand = 10.0
        sample.demand_std_dev = 6.0
        sample.min_daily_demand = 2
        sample.max_daily_demand = 25
        
        report = summarize_sample(sample)
        
        self.assertEqual(report['period_start'], '2024-01-01')
        self.assertEqual(report['period_days'], 31)
        self.assertEqual(report['demand_range'], 23)
        self.assertAlmostEqual(report['coefficient_of_variation'], 0.6)
        self.assertEqual(report['demand_stability'], DemandStability.MODERATE.value)
        self.assertFalse(report['is_stable_demand'])
        self.assertFalse(report['is_high_variability_demand'])

if __name__ == '__main__':
    unittest.main()
