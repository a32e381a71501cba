# Import key problem-related modules
from .cvrp_problem import CVRPProblem, CVRPInputError, load_problem
from .constraints import RouteValidator

# Specify which symbols to export when using "from problem import *"
__all__ = [
    # Problem Definition
    'CVRPProblem',
    'CVRPInputError',
    'load_problem',

    # Verification
    'RouteValidator',
]
