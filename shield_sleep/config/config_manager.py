# shield_sleep/config/config_manager.py
import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'SHIELD_SLEEP_CONFIG'

DEFAULT_CONFIG = {
    'api': {
        'title': 'SHIELD Sleep API',
        'version': '0.1.0',
        'cors_origins': ['http://localhost:3000'],
    },
    'scoring': {
        'randomize_borderline_delta': False,
        'seed': None,
    },
    'upload': {
        'simulated_delay_seconds': 1.0,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}


def _merge(base, override):
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Central configuration manager"""

    def __init__(self, config_path=None):
        self.config_path = config_path or os.environ.get(CONFIG_ENV_VAR) or 'config/config.yaml'
        self.config = _merge(DEFAULT_CONFIG, self._load_config())

    def _load_config(self):
        """Load configuration from file"""
        if not os.path.exists(self.config_path):
            logger.warning(f"Config file {self.config_path} not found, using defaults")
            return {}
        with open(self.config_path, 'r') as file:
            return yaml.safe_load(file) or {}

    def get(self, key, default=None):
        """Get configuration value"""
        # Support nested keys with dot notation
        keys = key.split('.')
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def configure_logging(self):
        """Apply the logging section to the root logger"""
        logging.basicConfig(
            level=getattr(logging, str(self.get('logging.level', 'INFO')).upper(), logging.INFO),
            format=self.get('logging.format'),
        )
