"""Django signals for RPC lifecycle events.

Signals
-------
rpc_method_started
    Sent when a procedure starts executing.
rpc_method_completed
    Sent when a procedure completes, including when it reports an error
    through its return value.
rpc_method_failed
    Sent when resolving, binding or running a procedure raises an error.

Examples
--------
Count failures per procedure::

    from collections import Counter
    from jsonrpc_dispatch.signals import rpc_method_failed

    failures = Counter()

    def on_failure(sender, method_name, error, **kwargs):
        failures[method_name] += 1

    rpc_method_failed.connect(on_failure)

Notes
-----
Signals are sent synchronously in the same thread/task as the RPC call.
Keep signal handlers lightweight.
"""

from __future__ import annotations

from django.dispatch import Signal

rpc_method_started = Signal()
"""Sent when a procedure starts executing.

Arguments:
    sender: The dispatcher class
    dispatcher: The dispatcher instance
    method_name (str): Name of the procedure
    params (dict | list): Supplied parameters
    rpc_id: Request ID
"""

rpc_method_completed = Signal()
"""Sent when a procedure completes.

Arguments:
    sender: The dispatcher class
    dispatcher: The dispatcher instance
    method_name (str): Name of the procedure
    result: The procedure's return value
    rpc_id: Request ID
    duration (float): Execution time in seconds
"""

rpc_method_failed = Signal()
"""Sent when a procedure call raises an error.

Arguments:
    sender: The dispatcher class
    dispatcher: The dispatcher instance
    method_name (str): Name of the procedure
    error (Exception): The exception that was raised
    rpc_id: Request ID
    duration (float): Time before failure in seconds
"""


__all__ = [
    "rpc_method_completed",
    "rpc_method_failed",
    "rpc_method_started",
]
