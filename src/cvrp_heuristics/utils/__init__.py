# Import key utility functions
from .export_json_solution import export_json_solution
from .config import load_config, validate_config, DEFAULT_CONFIG_PATH

# Specify which symbols to export when using "from utils import *"
__all__ = [
    'export_json_solution',
    'load_config',
    'validate_config',
    'DEFAULT_CONFIG_PATH',
]
