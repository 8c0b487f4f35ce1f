"""
Async-Safe Execution Utility

Single Responsibility: Run async functions safely from either sync or async contexts.

The cascade engine is fully async, but host adapters such as Django forms are
driven synchronously and may themselves be called while an event loop is
running (e.g. from an async view or test).
"""

import asyncio
import concurrent.futures
from typing import TypeVar, Callable, Any

T = TypeVar('T')


def run_async_safe(async_func: Callable[..., T], *args: Any, timeout: float = 30, **kwargs: Any) -> T:
    """
    Run an async function from either sync or async context.
    
    - In sync context: Uses asgiref's async_to_sync directly
    - In async context: Runs in a separate thread with its own event loop
    
    async_to_sync refuses to run when the current thread already has a
    running event loop, hence the thread hop.
    
    Args:
        async_func: The async function to execute
        *args: Positional arguments to pass to the function
        timeout: Maximum time to wait in the async-context case (default: 30 seconds)
        **kwargs: Keyword arguments to pass to the function
        
    Returns:
        The result of the async function
        
    Raises:
        TimeoutError: If execution exceeds the timeout
        Exception: Any exception raised by the async function
        
    Example:
        outcome = run_async_safe(service.perform_cascading, "System.State")
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running event loop - safe to use async_to_sync
        from asgiref.sync import async_to_sync
        return async_to_sync(async_func)(*args, **kwargs)

    def run_in_thread():
        new_loop = asyncio.new_event_loop()
        asyncio.set_event_loop(new_loop)
        try:
            return new_loop.run_until_complete(async_func(*args, **kwargs))
        finally:
            new_loop.close()

    with concurrent.futures.ThreadPoolExecutor() as executor:
        future = executor.submit(run_in_thread)
        return future.result(timeout=timeout)
