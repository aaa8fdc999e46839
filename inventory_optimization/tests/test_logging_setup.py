"""
Unit tests for the logging manager.
"""
import logging
import unittest
from datetime import timedelta

from inventory_optimization.logging_setup import logger, get_logger, log_exception

class TestLogger(unittest.TestCase):
    """Test cases for named loggers, exception logging and batch logs."""
    
    def test_named_loggers_are_cached(self):
        """Test that a name always maps to the same configured logger."""
        first = get_logger('inventory_test')
        
        self.assertIs(first, get_logger('inventory_test'))
        self.assertFalse(first.propagate)
    
    def test_log_exception_includes_traceback(self):
        """Test that exceptions are logged at ERROR with their stack trace."""
        try:
            raise RuntimeError("sweep failed")
        except RuntimeError as e:
            with self.assertLogs(get_logger('inventory_test'), level='ERROR') as captured:
                log_exception('inventory_test', e, "Tenant clinic-001")
        
        record = captured.records[0]
        self.assertEqual(record.getMessage(), "Tenant clinic-001: sweep failed")
        self.assertIsNotNone(record.exc_info)
    
    def test_batch_logs(self):
        """Test that a failed run is logged at ERROR and its duration returned."""
        with self.assertLogs(get_logger('batch'), level='INFO') as captured:
            run = logger.batch_start_log("ABC analysis", {'tenant_id': 'clinic-001'})
            duration = logger.batch_end_log(run, success=False, result_info={'classified': 0})
        
        self.assertIsInstance(duration, timedelta)
        self.assertEqual(
            [record.levelno for record in captured.records],
            [logging.INFO, logging.ERROR, logging.INFO]
        )
        self.assertIn("Failed batch process: ABC analysis", captured.output[1])

if __name__ == '__main__':
    unittest.main()
