#!/usr/bin/env python3

import os
import yaml
from typing import Dict, Any

from hardware_models import MemoryDevice, ComputeUnit, CostModel


def validate_config_structure(config: Dict[str, Any], config_file: str) -> None:
    """
    Validate that the configuration has the expected nested structure.

    Args:
        config: Configuration dictionary to validate
        config_file: Path to config file (for error messages)

    Raises:
        ValueError: If the configuration structure is invalid
    """
    if not isinstance(config, dict) or 'hardware' not in config:
        raise ValueError(
            f"Invalid configuration structure in {config_file}.\n"
            f"Missing required 'hardware' key.\n"
            f"Expected structure:\n"
            f"  hardware:\n"
            f"    compute: ...\n"
            f"    default_memory: ...\n"
            f"    alternate_memory: ..."
        )

    required_subsections = ['compute', 'default_memory', 'alternate_memory']
    missing_subsections = [s for s in required_subsections if s not in config['hardware']]
    if missing_subsections:
        raise ValueError(
            f"Invalid configuration structure in {config_file}.\n"
            f"Missing required hardware subsection(s): {', '.join(missing_subsections)}"
        )

    for tier in ('default_memory', 'alternate_memory'):
        bw = config['hardware'][tier].get('bandwidth_bytes_per_second')
        if bw is None or bw <= 0:
            raise ValueError(
                f"Invalid configuration in {config_file}: "
                f"hardware.{tier}.bandwidth_bytes_per_second must be positive, got {bw}"
            )

    flops = config['hardware']['compute'].get('flops_per_second')
    if flops is None or flops <= 0:
        raise ValueError(
            f"Invalid configuration in {config_file}: "
            f"hardware.compute.flops_per_second must be positive, got {flops}"
        )


def load_config(config_file: str = "configs/default.yaml") -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    Args:
        config_file: Path to config file. A bare name such as "default" is
                     looked up as "configs/default.yaml".

    Returns:
        Dictionary containing configuration values with nested structure

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config structure is invalid
    """
    if not config_file.endswith(('.yaml', '.yml')) and not os.path.isabs(config_file):
        config_file = f"configs/{config_file}.yaml"

    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with open(config_file, 'r') as f:
        config = yaml.safe_load(f)

    validate_config_structure(config, config_file)
    return config


def build_cost_model(config: Dict[str, Any]) -> CostModel:
    """Creates the compute unit, memory tiers and cost model described by `config`."""
    hw = config['hardware']
    compute = hw['compute']
    cu = ComputeUnit(
        name=compute.get('name', 'CU'),
        flops_per_second=float(compute['flops_per_second']),
        transcendentals_per_second=float(compute.get('transcendentals_per_second', 0.0)),
    )
    default_mem = MemoryDevice(
        name=hw['default_memory'].get('name', 'default'),
        bandwidth_bytes_per_second=float(hw['default_memory']['bandwidth_bytes_per_second']),
    )
    alternate_mem = MemoryDevice(
        name=hw['alternate_memory'].get('name', 'alternate'),
        bandwidth_bytes_per_second=float(hw['alternate_memory']['bandwidth_bytes_per_second']),
    )
    return CostModel(cu, default_mem, alternate_mem)
