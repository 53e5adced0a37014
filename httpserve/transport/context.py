"""Context object shared across worker threads."""

from dataclasses import dataclass
from typing import Optional

from httpserve.bootstrap.config import ServerConfig
from httpserve.domain.cache import Cache
from httpserve.lifecycle.state import ServerLifecycle


@dataclass(frozen=True)
class WorkerContext:
    """Read-only dependencies handed to every connection."""

    cache: Cache
    config: ServerConfig
    lifecycle: Optional[ServerLifecycle] = None
    transport_secure: bool = False
