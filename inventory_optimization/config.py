import os
import configparser
from pathlib import Path

DEFAULT_SETTINGS = {
    'DATABASE': {
        'url': 'sqlite:///inventory_optimization.db',
        'echo': 'False',
        'pool_size': '10',
        'max_overflow': '20',
        'pool_timeout': '30',
        'pool_recycle': '1800'
    },
    'LOGGING': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'directory': 'logs',
        'max_size_mb': '10',
        'backup_count': '5',
        'console_output': 'True',
        'file_output': 'True'
    },
    'BATCH_PROCESS': {
        'reorder_sweep_time': '08:00',
        'abc_analysis_day': '1',  # day of month
        'timeout_minutes': '60'
    },
    'BUSINESS_RULES': {
        'days_per_year': '365',
        'abc_a_threshold': '0.70',
        'abc_b_threshold': '0.90',
        'avg_daily_demand_tolerance': '0.01',
        'stable_cv_limit': '0.5',
        'variable_cv_limit': '1.0'
    }
}


class Config:
    """Configuration manager for the Inventory Optimization Engine."""
    
    _instance = None
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return
        
        env_path = os.environ.get('INVENTORY_OPT_CONFIG')
        self._config_path = Path(env_path) if env_path else Path('config') / 'settings.ini'
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(DEFAULT_SETTINGS)
        
        # File values override the built-in defaults
        if self._config_path.exists():
            self._config.read(self._config_path)
        
        self._initialized = True
    
    def _save_config(self):
        """Save configuration to file."""
        config_dir = self._config_path.parent
        if not config_dir.exists():
            config_dir.mkdir(parents=True)
        
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)
    
    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
    
    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def set(self, section, key, value, persist=True):
        """Set configuration value.
        
        Args:
            section: INI section name
            key: Option name
            value: New value (stored as string)
            persist: Whether to write the configuration back to disk
        """
        if not self._config.has_section(section):
            self._config.add_section(section)
        
        self._config.set(section, key, str(value))
        if persist:
            self._save_config()
    
    def get_db_url(self):
        """Get SQLAlchemy database URL."""
        return os.environ.get(
            'INVENTORY_OPT_DATABASE_URL',
            self.get('DATABASE', 'url', DEFAULT_SETTINGS['DATABASE']['url'])
        )
    
    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True),
            'file_output': self.get_boolean('LOGGING', 'file_output', True)
        }
    
    @property
    def batch_config(self):
        """Get batch processing configuration."""
        return {
            'reorder_sweep_time': self.get('BATCH_PROCESS', 'reorder_sweep_time', '08:00'),
            'abc_analysis_day': self.get_int('BATCH_PROCESS', 'abc_analysis_day', 1),
            'timeout_minutes': self.get_int('BATCH_PROCESS', 'timeout_minutes', 60)
        }
    
    @property
    def business_rules(self):
        """Get business rules configuration."""
        return {
            'days_per_year': self.get_int('BUSINESS_RULES', 'days_per_year', 365),
            'abc_a_threshold': self.get_float('BUSINESS_RULES', 'abc_a_threshold', 0.70),
            'abc_b_threshold': self.get_float('BUSINESS_RULES', 'abc_b_threshold', 0.90),
            'avg_daily_demand_tolerance': self.get_float('BUSINESS_RULES', 'avg_daily_demand_tolerance', 0.01),
            'stable_cv_limit': self.get_float('BUSINESS_RULES', 'stable_cv_limit', 0.5),
            'variable_cv_limit': self.get_float('BUSINESS_RULES', 'variable_cv_limit', 1.0)
        }

# Global config instance
config = Config()
