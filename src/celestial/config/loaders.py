"""
Configuration loaders for YAML and JSON files.

Files group settings into sections:

    tree:
      root_extent: 100.0
      max_depth: 64
      strict_bounds: false
    gravity:
      theta: 0.5
      G: 1.0
      softening: 0.01
    misc:
      verbose: true

which are flattened onto ``OctreeConfig`` fields.
"""

from typing import Dict, Any, Union
from pathlib import Path
import yaml
import json

from celestial.config.octree_config import OctreeConfig


def load_config(filename: Union[str, Path], **overrides) -> OctreeConfig:
    """
    Load octree configuration from YAML or JSON file.

    Parameters
    ----------
    filename : str or Path
        Path to configuration file (.yaml, .yml, or .json)
    **overrides : keyword arguments
        Override specific config values (e.g., theta=0.3)

    Returns
    -------
    config : OctreeConfig
        Validated configuration

    Raises
    ------
    FileNotFoundError
        If configuration file does not exist
    ValueError
        If file format is unsupported or config is invalid

    Examples
    --------
    >>> config = load_config("galaxy.yaml")
    >>> config = load_config("galaxy.yaml", theta=0.3)
    """
    filepath = Path(filename)

    if not filepath.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    suffix = filepath.suffix.lower()
    if suffix in ['.yaml', '.yml']:
        config_dict = load_yaml(filepath)
    elif suffix == '.json':
        config_dict = load_json(filepath)
    else:
        raise ValueError(
            f"Unsupported config file format: {suffix}. "
            "Use .yaml, .yml, or .json"
        )

    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration in {filepath} must be a mapping")

    flat_config = flatten_config(config_dict)
    flat_config.update(overrides)

    try:
        config = OctreeConfig(**flat_config)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed for {filepath}: {e}"
        ) from e

    return config


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """Load YAML configuration file (empty file -> empty dict)."""
    with open(filepath, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        config_dict = {}

    return config_dict


def load_json(filepath: Path) -> Dict[str, Any]:
    """Load JSON configuration file."""
    with open(filepath, 'r') as f:
        config_dict = json.load(f)

    return config_dict


def flatten_config(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten nested configuration dictionary.

    Converts nested structures like:
        {'gravity': {'theta': 0.5, 'G': 1.0}}
    to:
        {'theta': 0.5, 'G': 1.0}

    Parameters
    ----------
    config_dict : Dict[str, Any]
        Nested configuration dictionary

    Returns
    -------
    flat_dict : Dict[str, Any]
        Flattened configuration dictionary
    """
    flat = {}

    for key, value in config_dict.items():
        if isinstance(value, dict):
            flat.update(flatten_config(value))
        else:
            flat[key] = value

    return flat


def config_to_dict(config: OctreeConfig) -> Dict[str, Any]:
    """Organize a config into the sectioned layout used on disk."""
    values = config.model_dump()
    return {
        'tree': {
            'root_extent': values['root_extent'],
            'max_depth': values['max_depth'],
            'strict_bounds': values['strict_bounds'],
        },
        'gravity': {
            'theta': values['theta'],
            'G': values['G'],
            'softening': values['softening'],
        },
        'misc': {
            'verbose': values['verbose'],
        },
    }


def save_config(config: OctreeConfig, filename: Union[str, Path]) -> None:
    """
    Save OctreeConfig to a YAML or JSON file.

    Parameters
    ----------
    config : OctreeConfig
        Configuration to save
    filename : str or Path
        Output file path (.yaml, .yml or .json)
    """
    filepath = Path(filename)
    organized = config_to_dict(config)

    suffix = filepath.suffix.lower()
    if suffix in ['.yaml', '.yml']:
        with open(filepath, 'w') as f:
            yaml.dump(organized, f, default_flow_style=False, sort_keys=False)
    elif suffix == '.json':
        with open(filepath, 'w') as f:
            json.dump(organized, f, indent=2)
    else:
        raise ValueError(f"Unsupported output format: {suffix}. Use .yaml or .json")


def config_from_dict(config_dict: Dict[str, Any]) -> OctreeConfig:
    """Create OctreeConfig from a (possibly nested) dictionary."""
    return OctreeConfig(**flatten_config(config_dict))
