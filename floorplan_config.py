#!/usr/bin/env python3
"""
Run configuration for floorplan.py, read from an optional YAML file.

Example floorplan.yaml:
    outputs:
      on_error: best_effort   # or fail_fast
    validate: true
    plot:
      path: build/floorplan.png
      dpi: 150
      show_labels: true
"""

import copy
from typing import Any, Dict, Optional

import yaml


ON_ERROR_BEST_EFFORT = 'best_effort'
ON_ERROR_FAIL_FAST = 'fail_fast'
ON_ERROR_CHOICES = (ON_ERROR_BEST_EFFORT, ON_ERROR_FAIL_FAST)

DEFAULT_CONFIG = {
    'outputs': {
        'on_error': ON_ERROR_BEST_EFFORT
    },
    'validate': False,
    'plot': {
        'path': None,
        'dpi': 150,
        'show_labels': True
    }
}


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"Invalid {name} section. Must be a mapping")
    return section


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load run configuration, filling anything missing from DEFAULT_CONFIG.

    Args:
        config_path: Path to a YAML config file, or None for defaults only

    Returns:
        config: Dict with 'outputs', 'validate' and 'plot' sections
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not config_path:
        return config

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    outputs = _section(data, 'outputs')
    if 'on_error' in outputs:
        config['outputs']['on_error'] = outputs['on_error']

    if 'validate' in data:
        config['validate'] = data['validate']

    plot = _section(data, 'plot')
    for key in ('path', 'dpi', 'show_labels'):
        if key in plot:
            config['plot'][key] = plot[key]

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    on_error = config['outputs']['on_error']
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(
            f"Invalid outputs.on_error '{on_error}'. Must be one of: {', '.join(ON_ERROR_CHOICES)}"
        )

    if not isinstance(config['validate'], bool):
        raise ValueError(f"Invalid validate '{config['validate']}'. Must be true or false")

    show_labels = config['plot']['show_labels']
    if not isinstance(show_labels, bool):
        raise ValueError(f"Invalid plot.show_labels '{show_labels}'. Must be true or false")

    path = config['plot']['path']
    if path is not None and not isinstance(path, str):
        raise ValueError(f"Invalid plot.path '{path}'. Must be a file path")

    dpi = config['plot']['dpi']
    if isinstance(dpi, bool) or not isinstance(dpi, int) or dpi <= 0:
        raise ValueError(f"Invalid plot.dpi '{dpi}'. Must be a positive integer")


def is_fail_fast(config: Dict[str, Any]) -> bool:
    return config['outputs']['on_error'] == ON_ERROR_FAIL_FAST
