"""Command dispatch."""

from memoryctl.dispatch.dispatcher import VERBS, DispatchResult, Dispatcher

__all__ = ["VERBS", "DispatchResult", "Dispatcher"]
