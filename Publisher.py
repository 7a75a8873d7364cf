import typing as t
from dataclasses import dataclass

import requests
from verystable.rpc import BitcoinRPC, JSONRPCError

from errors import PublishError


class Publisher(t.Protocol):
    def publish(self, raw_tx_hex: str) -> str:
        ...


@dataclass
class ExplorerAPI:
    """Broadcasts through an Esplora-compatible REST API."""

    base_url: str
    timeout: int = 30

    def publish(self, raw_tx_hex: str) -> str:
        url = f"{self.base_url.rstrip('/')}/tx"
        try:
            resp = requests.post(url, data=raw_tx_hex, timeout=self.timeout)
        except requests.RequestException as e:
            raise PublishError(f"error publishing to {url}: {e}") from e

        if not resp.ok:
            raise PublishError(
                f"error publishing to {url}: {resp.text or f'HTTP {resp.status_code}'}"
            )
        return resp.text.strip()


@dataclass
class RpcPublisher:
    """Broadcasts through a bitcoind node."""

    rpc: BitcoinRPC

    def publish(self, raw_tx_hex: str) -> str:
        try:
            return self.rpc.sendrawtransaction(raw_tx_hex)
        except JSONRPCError as e:
            raise PublishError(f"node rejected transaction: {e}") from e
