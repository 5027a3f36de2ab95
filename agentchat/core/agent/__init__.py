"""
Agent layer: the action-provider framework, the per-request toolkit and the
chat loop that relays model output and tool activity as stream events.
"""

from .actions import Action, ActionProvider, error_result, success_result
from .events import StreamEvent
from .runner import ChatAgent

__all__ = [
    "Action",
    "ActionProvider",
    "ChatAgent",
    "StreamEvent",
    "error_result",
    "success_result",
]
