"""HTTP client construction using httpx directly.

A Request carries its client settings until dispatch and then builds one
``httpx.Client`` for that single exchange. Retry logic is intentionally
absent: a failed exchange is reported to the caller as-is.
"""

import logging
import ssl
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

import httpx

from httpreq.config import Config
from httpreq.http.headers import load_headers_from_file

logger = logging.getLogger(__name__)

TimeoutTypes = Union[float, httpx.Timeout, None]
VerifyTypes = Union[bool, str, ssl.SSLContext]


@dataclass
class ClientSettings:
    """Per-request client settings. Each field is last-write-wins.

    Attributes:
        timeout: Seconds, an httpx.Timeout, or None for no timeout
        verify: TLS verification (bool, CA bundle path or SSLContext)
        proxy: Proxy URL, mutually exclusive with transport
        transport: Caller-owned transport override, mutually exclusive with proxy
        headers: Default headers sent with every request of the client
    """

    timeout: TimeoutTypes = 30.0
    verify: VerifyTypes = True
    proxy: Optional[httpx.Proxy] = None
    transport: Optional[httpx.BaseTransport] = None
    follow_redirects: bool = True
    max_redirects: int = 10
    trust_env: bool = True
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> "ClientSettings":
        """Create settings from a Config object.

        Args:
            config: Configuration object

        Returns:
            ClientSettings with the config's defaults. The proxy is not
            included; Request.set_proxy parses it so a bad URL is recorded
            on the chain.
        """
        headers = {'User-Agent': config.user_agent}

        # Load additional headers from file
        if config.header_file and Path(config.header_file).exists():
            file_headers = load_headers_from_file(config.header_file)
            headers.update(file_headers)

        return cls(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=config.follow_redirects,
            max_redirects=config.max_redirects,
            trust_env=config.trust_env,
            headers=headers,
        )

    @property
    def owns_transport(self) -> bool:
        """False when the caller supplied the transport and is responsible for it."""
        return self.transport is None


def create_client(settings: ClientSettings) -> httpx.Client:
    """Create an httpx client from request settings.

    Args:
        settings: Client settings of the request being dispatched

    Returns:
        Configured httpx.Client instance
    """
    kwargs = dict(
        headers=settings.headers,
        timeout=settings.timeout,
        verify=settings.verify,
        follow_redirects=settings.follow_redirects,
        max_redirects=settings.max_redirects,
        trust_env=settings.trust_env,
    )

    if settings.transport is not None:
        kwargs['transport'] = settings.transport
    elif settings.proxy is not None:
        kwargs['proxy'] = settings.proxy

    logger.debug(
        f"Creating client: timeout={settings.timeout!r}, "
        f"proxy={settings.proxy.url if settings.proxy else None}, "
        f"custom_transport={settings.transport is not None}"
    )
    return httpx.Client(**kwargs)
