"""Configuration management for the preference engine."""

import copy
import logging
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_CONFIG_PATH = "config/config.yaml"

DEFAULTS: Dict[str, Any] = {
    'data': {
        'candidates_path': 'data/sp500.csv',
    },
    'embeddings': {
        'path': None,
        'dimension': 300,
        'limit': None,
    },
    'features': {
        'weights': {
            'numeric': 1.0,
            'categorical': 0.8,
            'text': 0.5,
        },
    },
    'session': {
        'swipe_budget': 10,
        'recommendation_count': 5,
        'traversal_mode': 'sequential',
        'final_pool': None,
    },
    'logging': {
        'level': 'INFO',
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Centralized configuration manager."""
    
    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration from a YAML file layered over the defaults.

        Relative paths resolve against the project root. The default file is
        optional; a path passed explicitly must exist.
        """
        path = config_path or DEFAULT_CONFIG_PATH
        config_file = Path(path)
        if not config_file.is_absolute():
            config_file = Path(__file__).parent.parent / path
        
        file_config: Dict[str, Any] = {}
        if config_file.exists():
            with open(config_file, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        elif config_path is not None:
            raise FileNotFoundError(f"Config file not found: {config_file}")
        
        self.config_file = config_file
        self.config = _merge(DEFAULTS, file_config)
        
        # Replace environment variable placeholders
        self._substitute_env_vars(self.config)
    
    def _substitute_env_vars(self, obj: Any) -> None:
        """Recursively substitute environment variables in config."""
        if isinstance(obj, dict):
            for key, value in obj.items():
                if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                    env_var = value[2:-1]
                    obj[key] = os.getenv(env_var, value)
                else:
                    self._substitute_env_vars(value)
        elif isinstance(obj, list):
            for item in obj:
                self._substitute_env_vars(item)
    
    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.
        
        Example: config.get('features.weights.text')
        """
        keys = path.split('.')
        value = self.config
        
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default
        
        return value
    
    @property
    def candidates_path(self) -> str:
        """Get candidate CSV path."""
        return self.get('data.candidates_path', 'data/sp500.csv')
    
    @property
    def embeddings_path(self) -> Optional[str]:
        """Get word-vector file path, if one is configured."""
        path = self.get('embeddings.path')
        if not path or str(path).startswith('${'):
            return None
        return str(path)
    
    @property
    def embedding_dimension(self) -> int:
        """Get embedding dimension shared by embedder and feature engine."""
        return int(self.get('embeddings.dimension', 300))
    
    @property
    def feature_weights(self) -> Dict[str, float]:
        """Get block weights for numeric, categorical and text features."""
        weights = self.get('features.weights', {})
        return {
            'numeric': float(weights.get('numeric', 1.0)),
            'categorical': float(weights.get('categorical', 0.8)),
            'text': float(weights.get('text', 0.5)),
        }
    
    @property
    def swipe_budget(self) -> int:
        """Get the number of swipes per session."""
        return int(self.get('session.swipe_budget', 10))
    
    @property
    def recommendation_count(self) -> int:
        """Get the number of final recommendations."""
        return int(self.get('session.recommendation_count', 5))
    
    @property
    def traversal_mode(self) -> str:
        """Get default traversal mode ('sequential' or 'greedy')."""
        return self.get('session.traversal_mode', 'sequential')
    
    @property
    def final_pool(self) -> Optional[str]:
        """Get final recommendation pool override ('full_corpus' or 'remaining')."""
        return self.get('session.final_pool')
    
    @property
    def log_level(self) -> str:
        """Get logging level name."""
        return str(self.get('logging.level', 'INFO')).upper()


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts and the API server."""
    logging.basicConfig(
        level=level or get_config().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
