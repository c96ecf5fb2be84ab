"""Shared Kernel Application Module."""

from .cqrs import Command, CommandHandler, Query, QueryHandler, QueryView

__all__ = [
    "Command",
    "CommandHandler",
    "Query",
    "QueryHandler",
    "QueryView",
]
