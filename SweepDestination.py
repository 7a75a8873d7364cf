from dataclasses import dataclass, field
from verystable.core import script
from verystable.core.messages import CTxOut
from verystable.core.script import CScript
from verystable.core.segwit_addr import decode_segwit_address

from errors import InvalidSweepAddress, MissingSweepAddress

NETWORK_HRPS = {
    "mainnet": "bc",
    "testnet": "tb",
    "signet": "tb",
    "regtest": "bcrt",
}


@dataclass(frozen=True)
class SweepDestination:
    """The single P2WPKH output all swept funds are paid to."""

    addr: str
    network: str = "mainnet"
    scriptPubKey: CScript = field(init=False)

    def __post_init__(self):
        if not self.addr:
            raise MissingSweepAddress("sweep addr is required")
        object.__setattr__(self, "scriptPubKey", self._decode())

    def _decode(self) -> CScript:
        hrp = NETWORK_HRPS[self.network]
        version, program = decode_segwit_address(hrp, self.addr)
        if version is None:
            raise InvalidSweepAddress(
                f"can't decode sweep addr {self.addr} as a {self.network} address"
            )
        if version != 0 or len(program) != 20:
            raise InvalidSweepAddress(
                f"sweep addr {self.addr} must be a P2WPKH (native segwit v0) address"
            )
        return CScript([script.OP_0, bytes(program)])

    def as_vout(self, value_sats: int) -> CTxOut:
        return CTxOut(nValue=value_sats, scriptPubKey=self.scriptPubKey)
