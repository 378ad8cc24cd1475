"""
Access control for projects and tasks.

Every entry point resolves a ``Principal``, loads an ``AccessContext`` for the
target resource and asks ``decide`` whether the operation is allowed.
"""

from .context import AccessContext, ProjectFacts, TaskFacts
from .policy import Decision, Operation, decide
from .principal import Principal

__all__ = [
    "AccessContext",
    "Decision",
    "Operation",
    "Principal",
    "ProjectFacts",
    "TaskFacts",
    "decide",
]
