from dataclasses import dataclass
from functools import cached_property

from SweepDestination import SweepDestination
from config import (
    DEFAULT_CSV_LIMIT,
    DEFAULT_FEE_RATE_SAT_PER_VBYTE,
    ESPLORA_API_URL,
    NETWORK_COIN_TYPES,
)
from errors import MissingSweepAddress

UINT16_MAX = 0xFFFF


@dataclass
class SweepConfig:
    """Options for a single time-lock sweep run."""

    sweep_addr: str
    max_csv_limit: int = DEFAULT_CSV_LIMIT
    fee_rate: int = DEFAULT_FEE_RATE_SAT_PER_VBYTE
    publish: bool = False
    api_url: str = ESPLORA_API_URL
    network: str = "mainnet"

    def __post_init__(self) -> None:
        if not self.sweep_addr:
            raise MissingSweepAddress("sweep addr is required")

        # Zero means "not set", same as leaving the flag off.
        if not self.max_csv_limit:
            self.max_csv_limit = DEFAULT_CSV_LIMIT
        if not self.fee_rate:
            self.fee_rate = DEFAULT_FEE_RATE_SAT_PER_VBYTE

        for name in ("max_csv_limit", "fee_rate"):
            if not 0 < getattr(self, name) <= UINT16_MAX:
                raise ValueError(f"{name} must fit in 16 bits, got {getattr(self, name)}")

        if self.network not in NETWORK_COIN_TYPES:
            raise ValueError(f"unknown network {self.network!r}")

    @cached_property
    def destination(self) -> SweepDestination:
        return SweepDestination(self.sweep_addr, self.network)
