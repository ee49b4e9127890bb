from .filter import Decision, EventFilter, Verdict
from .handler import Outcome, WebhookHandler

__all__ = ["Decision", "EventFilter", "Verdict", "Outcome", "WebhookHandler"]
