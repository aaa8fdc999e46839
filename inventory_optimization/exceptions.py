class InventoryOptimizationError(Exception):
    """Base exception for Inventory Optimization Engine errors."""
    
    default_message = "An error occurred in the Inventory Optimization Engine"
    
    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.
        
        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)
    
    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message
    
    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }
        
        if self.code:
            error_dict['code'] = self.code
            
        if self.details:
            error_dict['details'] = self.details
            
        return error_dict


class ConfigError(InventoryOptimizationError):
    """Exception raised for configuration errors."""
    default_message = "Configuration error"


class DatabaseError(InventoryOptimizationError):
    """Exception raised for database-related errors."""
    default_message = "Database error"


class ValidationError(InventoryOptimizationError):
    """Exception raised when a write supplies data violating a domain constraint.
    
    ``details`` maps each offending field name to a message.
    """
    default_message = "Validation error"


class NotFoundError(InventoryOptimizationError):
    """Exception raised when a requested resource is not found."""
    default_message = "Resource not found"


class CalculationError(InventoryOptimizationError):
    """Exception raised for calculation errors."""
    default_message = "Calculation error"


class EOQError(CalculationError):
    """Exception raised for economic order quantity calculation errors."""
    default_message = "Economic order quantity calculation error"


class SafetyStockError(CalculationError):
    """Exception raised for safety stock calculation errors."""
    default_message = "Safety stock calculation error"


class ClassificationError(InventoryOptimizationError):
    """Exception raised for ABC classification errors."""
    default_message = "ABC classification error"


class DemandAnalyticsError(InventoryOptimizationError):
    """Exception raised for demand statistics errors."""
    default_message = "Demand analytics error"


class ReorderError(InventoryOptimizationError):
    """Exception raised for reorder sweep errors."""
    default_message = "Reorder sweep error"


class BatchProcessError(InventoryOptimizationError):
    """Exception raised for batch process errors."""
    default_message = "Batch process error"
