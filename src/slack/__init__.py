"""
Slack module.

Client cache, event dispatcher, action handler and the Bolt app wiring.
"""

from src.slack.actions import ActionHandler
from src.slack.app import create_bolt_app
from src.slack.client_cache import ClientCache, ClientCacheAuthorize
from src.slack.events import EventDispatcher, MessageRule

__all__ = [
    "ActionHandler",
    "ClientCache",
    "EventDispatcher",
    "MessageRule",
    "ClientCacheAuthorize",
    "create_bolt_app",
]
