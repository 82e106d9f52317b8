"""Registry reachability checks."""

import logging
import os
import socket
from urllib.parse import urlparse

from create_webiny_project.packages.manager import PackageManager

logger = logging.getLogger(__name__)

PROXY_ENV_VARS = ("https_proxy", "HTTPS_PROXY")


def get_proxy(package_manager: PackageManager) -> str | None:
    """Return the configured HTTPS proxy, from the environment or yarn config."""
    for env_var in PROXY_ENV_VARS:
        proxy = os.environ.get(env_var)
        if proxy:
            return proxy
    return package_manager.get_config("https-proxy")


def can_resolve(host: str) -> bool:
    """Check whether a hostname resolves."""
    try:
        socket.getaddrinfo(host, None)
    except (socket.gaierror, UnicodeError):
        return False
    return True


def is_online(registry_host: str, package_manager: PackageManager) -> bool:
    """Check whether the package registry looks reachable.

    When the registry can't be resolved but a proxy is configured, external
    hostnames likely can't be resolved at all; resolving the proxy host is
    then taken as the indication of a connection.
    """
    if can_resolve(registry_host):
        return True

    proxy = get_proxy(package_manager)
    if proxy:
        proxy_host = urlparse(proxy).hostname
        if proxy_host:
            logger.debug("Registry unresolvable, checking proxy %s", proxy_host)
            return can_resolve(proxy_host)

    return False
