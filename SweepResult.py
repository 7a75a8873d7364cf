from dataclasses import dataclass, field

from SweepInput import SweepInput
from SweepTransaction import SweepTransaction


@dataclass(frozen=True)
class SkippedRecord:
    channel_point: str
    reason: str
    detail: str = ""


@dataclass
class SweepResult:
    """What a sweep run produced, and what it had to leave behind."""

    sweep: SweepTransaction
    skipped: list[SkippedRecord] = field(default_factory=list)
    publish_response: str | None = None

    @property
    def swept(self) -> list[SweepInput]:
        return self.sweep.inputs

    @property
    def raw_tx_hex(self) -> str:
        return self.sweep.tohex()

    @property
    def txid(self) -> str:
        return self.sweep.txid

    @property
    def fee_sats(self) -> int:
        return self.sweep.fee_sats

    @property
    def estimated_weight(self) -> int:
        return self.sweep.estimated_weight
