"""Django application configuration for jsonrpc-dispatch."""

from __future__ import annotations

import logging

from django.apps import AppConfig

logger = logging.getLogger("jsonrpc_dispatch")


class JsonRpcDispatchConfig(AppConfig):
    """Django app configuration for jsonrpc-dispatch.

    Examples
    --------
    Add to INSTALLED_APPS in settings.py::

        INSTALLED_APPS = [
            ...
            'jsonrpc_dispatch',
            ...
        ]
    """

    name = "jsonrpc_dispatch"
    verbose_name = "JSON-RPC Dispatch"

    def ready(self) -> None:
        """Load configuration when Django starts and log a summary.

        Notes
        -----
        This method should not perform any database operations or import
        models, as it runs before Django is fully initialized.
        """
        from jsonrpc_dispatch.config import get_config, reset_config

        # Settings may have changed since an earlier import read them
        reset_config()
        config = get_config()

        logger.info(
            "jsonrpc-dispatch initialized: DETECT_OUTPUT_ERROR=%s, "
            "host restriction=%s, authentication=%s",
            config.detect_output_error,
            config.allowed_hosts is not None,
            config.users is not None,
        )

        if config.log_rpc_params:
            logger.warning(
                "LOG_RPC_PARAMS is enabled - RPC parameters will be logged. "
                "This may expose sensitive information (PII, credentials). "
                "Only enable in development environments."
            )
