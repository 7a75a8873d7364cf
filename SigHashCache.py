import struct
from dataclasses import dataclass, field

from verystable.core import script
from verystable.core.messages import hash256, ser_string
from verystable.script import CTransaction


@dataclass
class SigHashCache:
    """
    BIP143 digests for every input of one transaction. The prevouts, sequences and
    outputs midstates only depend on the transaction, so they're hashed once and
    reused for each input we sign.

    The transaction must not change after this is constructed.
    """

    tx: CTransaction
    hash_prevouts: bytes = field(init=False)
    hash_sequence: bytes = field(init=False)
    hash_outputs: bytes = field(init=False)

    def __post_init__(self) -> None:
        self.hash_prevouts = hash256(
            b"".join(txin.prevout.serialize() for txin in self.tx.vin)
        )
        self.hash_sequence = hash256(
            b"".join(struct.pack("<I", txin.nSequence) for txin in self.tx.vin)
        )
        self.hash_outputs = hash256(b"".join(out.serialize() for out in self.tx.vout))

    def segwit_v0(
        self,
        witness_script: bytes,
        input_index: int,
        amount_sats: int,
        hash_type: int = script.SIGHASH_ALL,
    ) -> bytes:
        if hash_type != script.SIGHASH_ALL:
            raise ValueError(f"only SIGHASH_ALL is supported, got {hash_type:#x}")

        txin = self.tx.vin[input_index]
        ss = struct.pack("<i", self.tx.version)
        ss += self.hash_prevouts
        ss += self.hash_sequence
        ss += txin.prevout.serialize()
        ss += ser_string(witness_script)
        ss += struct.pack("<q", amount_sats)
        ss += struct.pack("<I", txin.nSequence)
        ss += self.hash_outputs
        ss += struct.pack("<I", self.tx.nLockTime)
        ss += struct.pack("<I", hash_type)
        return hash256(ss)
