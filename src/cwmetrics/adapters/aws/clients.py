"""Per-region boto3 client construction."""

import threading
from typing import Any

import boto3
from botocore.config import Config


class ClientFactory:
    """Creates and caches one boto3 client per (service, region).

    Args:
        session: boto3 session supplying credentials. Defaults to a new session.
        fips_enabled: Use FIPS endpoints.
    """

    def __init__(
        self, session: boto3.session.Session | None = None, fips_enabled: bool = False
    ) -> None:
        self._session = session or boto3.session.Session()
        self._config = Config(use_fips_endpoint=fips_enabled)
        self._clients: dict[tuple[str, str], Any] = {}
        # Regions may be collected concurrently.
        self._lock = threading.Lock()

    def client(self, service: str, region: str) -> Any:
        key = (service, region)
        with self._lock:
            if key not in self._clients:
                self._clients[key] = self._session.client(
                    service, region_name=region, config=self._config
                )
            return self._clients[key]
