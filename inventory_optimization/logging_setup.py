import logging
import logging.handlers
from pathlib import Path
from datetime import datetime

from inventory_optimization.config import config

class Logger:
    """Logging manager for the Inventory Optimization Engine.

    Loggers handed out here write to ``<directory>/<name>.log`` and, when
    enabled, to the console. Service modules that use
    ``logging.getLogger(__name__)`` go through the root handlers instead.
    """

    _instance = None
    _loggers = {}

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger if not already initialized."""
        if self._initialized:
            return

        settings = config.log_config
        self._level = getattr(logging, settings['level'].upper(), logging.INFO)
        self._formatter = logging.Formatter(settings['format'])
        self._console = settings['console_output']
        self._log_dir = Path(settings['directory']) if settings['file_output'] else None
        self._max_bytes = settings['max_size_mb'] * 1024 * 1024
        self._backup_count = settings['backup_count']

        if self._log_dir is not None:
            self._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(self._level)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        if self._console:
            root_logger.addHandler(self._console_handler())

        self._initialized = True

    def _console_handler(self):
        handler = logging.StreamHandler()
        handler.setFormatter(self._formatter)
        return handler

    def _file_handler(self, name):
        handler = logging.handlers.RotatingFileHandler(
            self._log_dir / f"{name}.log",
            maxBytes=self._max_bytes,
            backupCount=self._backup_count
        )
        handler.setFormatter(self._formatter)
        return handler

    def get_logger(self, name):
        """Get a logger with the specified name.

        Args:
            name: Name of the logger (also the log file name)

        Returns:
            Configured logger instance
        """
        if name in self._loggers:
            return self._loggers[name]

        named_logger = logging.getLogger(name)
        named_logger.setLevel(self._level)
        named_logger.handlers = []

        if self._log_dir is not None:
            named_logger.addHandler(self._file_handler(name))
        if self._console:
            named_logger.addHandler(self._console_handler())

        # Own handlers only; the root logger would print a second copy
        named_logger.propagate = False

        self._loggers[name] = named_logger
        return named_logger

    def log_exception(self, logger_name, exception, message=None):
        """Log an exception with its stack trace at ERROR level."""
        text = f"{message}: {exception}" if message else str(exception)
        self.get_logger(logger_name).error(text, exc_info=exception)

    def batch_start_log(self, process_name, additional_info=None):
        """Log the start of a scheduled job.

        Args:
            process_name: Name of the job
            additional_info: Optional parameters of the run

        Returns:
            Run record to pass to batch_end_log
        """
        self.get_logger('batch').info(
            f"Starting batch process: {process_name}"
            + (f" {additional_info}" if additional_info else "")
        )
        return {
            'process_name': process_name,
            'start_time': datetime.now(),
            'additional_info': additional_info
        }

    def batch_end_log(self, log_info, success=True, result_info=None):
        """Log the end of a scheduled job.

        Args:
            log_info: Run record returned by batch_start_log
            success: Whether the job succeeded
            result_info: Optional summary of the run

        Returns:
            Duration of the job as a timedelta
        """
        batch_logger = self.get_logger('batch')
        end_time = datetime.now()
        duration = end_time - log_info.get('start_time', end_time)
        process_name = log_info.get('process_name', 'Unknown')

        outcome = "Completed" if success else "Failed"
        level = logging.INFO if success else logging.ERROR
        batch_logger.log(level, f"{outcome} batch process: {process_name} in {duration}")
        if result_info:
            batch_logger.info(f"Process results: {result_info}")

        return duration

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)

def log_exception(logger_name, exception, message=None):
    """Log an exception with stack trace."""
    logger.log_exception(logger_name, exception, message)
