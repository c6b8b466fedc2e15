"""Turn management and background engine jobs"""

from .turns import TurnManager
from .worker import AIWorker

__all__ = [
    'TurnManager',
    'AIWorker',
]
