"""HTTP middleware"""
from .instrumentation import GoldenSignalsMiddleware, RequestLoggingMiddleware

__all__ = [
    'GoldenSignalsMiddleware',
    'RequestLoggingMiddleware'
]
