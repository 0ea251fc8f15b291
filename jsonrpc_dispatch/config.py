"""Configuration management for jsonrpc-dispatch.

This module provides a configuration class that integrates with Django
settings, allowing runtime configuration of dispatching, logging and access
control.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

SETTINGS_KEY = "JSONRPC_DISPATCH"


@dataclass
class RpcConfig:
    """Main configuration for jsonrpc-dispatch.

    Attributes
    ----------
    detect_output_error : bool
        Treat a mapping returned by a procedure that contains an ``error``
        entry as an application error.
    log_rpc_params : bool
        Whether to log RPC parameters (may contain PII).
    allowed_hosts : list[str] | None
        Client addresses allowed to call the HTTP consumer. None allows all.
    users : dict[str, str] | None
        HTTP Basic credentials (username to password). None disables
        authentication.

    Examples
    --------
    In Django settings.py::

        JSONRPC_DISPATCH = {
            'DETECT_OUTPUT_ERROR': True,
            'ALLOWED_HOSTS': ['127.0.0.1'],
            'USERS': {'api': 'secret'},
        }
    """

    detect_output_error: bool = False
    log_rpc_params: bool = False
    allowed_hosts: list[str] | None = None
    users: dict[str, str] | None = None

    @classmethod
    def from_settings(cls) -> RpcConfig:
        """Load configuration from Django settings.

        Reads the ``JSONRPC_DISPATCH`` dictionary. Falls back to default values
        when the key is absent or Django settings are not configured.

        Returns
        -------
        RpcConfig
            Configuration instance with values from settings or defaults.
        """
        try:
            config = getattr(settings, SETTINGS_KEY, {})
        except ImproperlyConfigured:
            # Used outside a Django project
            config = {}

        allowed_hosts = config.get("ALLOWED_HOSTS")
        users = config.get("USERS")

        return cls(
            detect_output_error=bool(config.get("DETECT_OUTPUT_ERROR", False)),
            log_rpc_params=bool(config.get("LOG_RPC_PARAMS", False)),
            allowed_hosts=list(allowed_hosts) if allowed_hosts is not None else None,
            users=dict(users) if users is not None else None,
        )


# Global configuration instance
_config: RpcConfig | None = None


def get_config() -> RpcConfig:
    """Get the global RPC configuration instance.

    On first call the configuration is loaded from Django settings; later
    calls return the cached instance.

    Returns
    -------
    RpcConfig
        The global configuration instance.
    """
    global _config
    if _config is None:
        _config = RpcConfig.from_settings()
    return _config


def reset_config() -> None:
    """Reset the global configuration cache.

    Mostly useful in tests, to reload configuration after changing settings.
    """
    global _config
    _config = None
