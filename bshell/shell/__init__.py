"""Interactive shell package."""

from .common import DispatchResult, LoopState, ShellConfig, ShellState
from .core import BShell
from .dispatcher import Dispatcher

__all__ = ["BShell", "Dispatcher", "DispatchResult", "LoopState", "ShellConfig", "ShellState"]
