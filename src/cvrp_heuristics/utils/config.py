"""
Configuration Handler
====================

This module loads solver settings (cooling schedule, iteration caps, savings
admission factor, time limit) from JSON files and checks that every setting
the solvers read is present and within range. Missing, malformed or invalid
files are reported and terminate the program.

Usage:
    config = load_config()                      # packaged defaults
    config = load_config("path/to/config.json")

    # Check a hand-built configuration dictionary
    errors = validate_config({"COOLING_RATE": 1.5, ...})
"""

import os
import json
import logging
import sys

logger = logging.getLogger("load_config")

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.json")

# Setting name -> (check, description of the accepted values)
CONFIG_RULES = {
    "DEFAULT_STRATEGY": (lambda v: isinstance(v, str) and bool(v), "a non-empty strategy name"),
    "INITIAL_TEMPERATURE": (lambda v: _is_number(v) and v > 0, "a positive number"),
    "COOLING_RATE": (lambda v: _is_number(v) and 0 < v < 1, "a number strictly between 0 and 1"),
    "MIN_TEMPERATURE": (lambda v: _is_number(v) and v > 0, "a positive number"),
    "ITERATIONS_PER_TEMPERATURE": (lambda v: _is_integer(v) and v >= 1, "an integer >= 1"),
    "MAX_ITERATIONS": (lambda v: _is_integer(v) and v >= 0, "an integer >= 0"),
    "SAVINGS_DISTANCE_FACTOR": (lambda v: _is_number(v) and v > 0, "a positive number"),
    "TIME_LIMIT": (lambda v: v is None or (_is_number(v) and v > 0), "null or a positive number of seconds"),
}

def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)

def validate_config(config):
    """
    Check a configuration dictionary against CONFIG_RULES.

    Unknown keys are allowed and ignored.

    Args:
        config (dict): Configuration parameters

    Returns:
        list: Human-readable error messages; empty when the configuration is usable
    """
    if not isinstance(config, dict):
        return [f"Configuration must be a JSON object, got {type(config).__name__}"]

    errors = []
    for key, (check, expected) in CONFIG_RULES.items():
        if key not in config:
            errors.append(f"Missing setting {key} (expected {expected})")
        elif not check(config[key]):
            errors.append(f"Invalid setting {key}={config[key]!r} (expected {expected})")
    return errors

def load_config(config_path=DEFAULT_CONFIG_PATH):
    """
    Load and validate solver configuration settings from a JSON file.

    The program exits with status code 1 if the configuration cannot be loaded
    or fails validation.

    Args:
        config_path (str): Path to the JSON configuration file
                         (default: the config.json shipped with the package)

    Returns:
        dict: Configuration parameters as a dictionary

    Raises:
        SystemExit: If the configuration file cannot be loaded or is invalid
    """
    if not os.path.exists(config_path):
        logger.error(f"Configuration file {config_path} not found.")
        sys.exit(1)

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing configuration file {config_path}: {e}")
        sys.exit(1)
    except IOError as e:
        logger.error(f"Error reading configuration file {config_path}: {e}")
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        for error in errors:
            logger.error(f"{config_path}: {error}")
        sys.exit(1)

    logger.info(f"Configuration loaded from {config_path}")
    return config
