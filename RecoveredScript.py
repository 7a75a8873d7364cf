from dataclasses import dataclass
from verystable.core.script import CScript


@dataclass(frozen=True)
class RecoveredScript:
    """A to_local witness script whose P2WSH hash matches an on-chain output."""

    csv_delay: int
    witness_script: CScript
    script_hash: CScript

    def __str__(self) -> str:
        return f"csv={self.csv_delay} spk={bytes(self.script_hash).hex()}"
