"""
Configuration module: octree parameters and YAML/JSON loading.
"""

from celestial.config.octree_config import OctreeConfig
from celestial.config.loaders import (
    load_config,
    save_config,
    config_from_dict,
    config_to_dict,
    flatten_config,
)

__all__ = [
    'OctreeConfig',
    'load_config',
    'save_config',
    'config_from_dict',
    'config_to_dict',
    'flatten_config',
]
