"""Widget exports for the nest chat UI."""

from .code_block import CodeBlock, CopyRequested
from .conversation import ConversationView
from .message import MessageBubble

__all__ = ["CodeBlock", "ConversationView", "CopyRequested", "MessageBubble"]
