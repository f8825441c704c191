"""Dream context management system."""

from .builder import DreamContextBuilder
from .prompts import DreamPrompts
from .context_window import InterpretationContextWindow

__all__ = [
    "DreamContextBuilder",
    "DreamPrompts",
    "InterpretationContextWindow"
]
