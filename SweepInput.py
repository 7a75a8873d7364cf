from dataclasses import dataclass
from functools import cached_property

from KeyDescriptor import KeyDescriptor
from RecoveredScript import RecoveredScript
from verystable.core import script
from verystable.core.messages import COutPoint, CTxIn, CTxOut


@dataclass(frozen=True)
class SweepInput:
    """
    Everything needed to spend one to_local output: where it is, the recovered
    script, and how to get at the key that signs for it.
    """

    channel_point: str
    outpoint: COutPoint
    value_sats: int
    recovered: RecoveredScript
    key_desc: KeyDescriptor
    single_tweak: bytes
    sequence: int
    hash_type: int = script.SIGHASH_ALL

    @property
    def witness_script(self) -> bytes:
        return self.recovered.witness_script

    @cached_property
    def output(self) -> CTxOut:
        return CTxOut(nValue=self.value_sats, scriptPubKey=self.recovered.script_hash)

    @cached_property
    def as_txin(self) -> CTxIn:
        return CTxIn(self.outpoint, nSequence=self.sequence)

    def __str__(self) -> str:
        return f"{self.channel_point} ({self.value_sats} sats, {self.recovered})"
