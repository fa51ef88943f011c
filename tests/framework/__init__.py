"""
Test helpers for exercising routers and transitions.
"""

from .handlers import CallLog, RecordingHandler, build_router

__all__ = [
    'CallLog',
    'RecordingHandler',
    'build_router',
]
