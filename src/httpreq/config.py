"""Configuration management for httpreq."""

from dataclasses import dataclass
from typing import Optional

from httpreq import __version__


@dataclass
class Config:
    """Default client configuration for new requests.

    Every Request copies these values at construction; builder calls such as
    ``set_timeout`` or ``set_proxy`` then override them for that request only.
    """

    # HTTP settings
    timeout: float = 30.0  # seconds
    verify_ssl: bool = True
    proxy: Optional[str] = None
    user_agent: str = f"httpreq/{__version__}"
    trust_env: bool = True  # Honour HTTP(S)_PROXY, SSL_CERT_FILE etc.

    # Redirect settings
    follow_redirects: bool = True
    max_redirects: int = 10

    # Extra default headers, one "Name: value" pair per line
    header_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"Invalid timeout: {self.timeout}")

        if self.max_redirects < 0:
            raise ValueError(f"Invalid max_redirects: {self.max_redirects}")
