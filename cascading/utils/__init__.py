"""
Utilities package.

Provides async-safe helpers for calling the cascade engine from sync code.
"""

from .async_safe import run_async_safe

__all__ = ['run_async_safe']
