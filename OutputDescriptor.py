from dataclasses import dataclass
from utils import txid_to_int
from verystable.core.messages import COutPoint


@dataclass(frozen=True)
class OutputDescriptor:
    """One output of a historical commitment transaction."""

    index: int
    value_sats: int
    script: bytes

    def coutpoint(self, txid: str) -> COutPoint:
        return COutPoint(txid_to_int(txid), self.index)

    @classmethod
    def from_json(cls, index: int, obj: dict) -> "OutputDescriptor":
        return cls(index, int(obj.get("value", 0)), bytes.fromhex(obj.get("script", "")))

    def __str__(self) -> str:
        return f"output {self.index} ({self.value_sats} sats)"
