from .engine import HabitEngine
from .errors import EngineError, InvalidInput, InvalidTransition, NotFound

__all__ = ["HabitEngine", "EngineError", "InvalidInput", "InvalidTransition", "NotFound"]
