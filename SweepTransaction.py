import typing as t
from dataclasses import dataclass, field

from verystable.core.messages import CTxInWitness
from verystable.script import CTransaction

from SigHashCache import SigHashCache
from SweepDestination import SweepDestination
from SweepInput import SweepInput
from TxWeightEstimator import (
    TO_LOCAL_TIMEOUT_WITNESS_SIZE,
    TxWeightEstimator,
    fee_for_weight,
    fee_per_kw_from_sat_per_vbyte,
)
from config import DEFAULT_FEE_RATE_SAT_PER_VBYTE, P2WPKH_DUST_LIMIT_SATS
from errors import InsufficientFunds, NoSweepableOutputs
from logger_config import log

if t.TYPE_CHECKING:
    from KeyRing import KeyRing


@dataclass
class SweepTransaction:
    """
    Collects to_local inputs into a single transaction paying one destination.

    Inputs are added while records are processed; `finalize()` is called once to
    fix the fee and output value, then `sign()` fills in every witness.
    """

    destination: SweepDestination
    fee_rate_sat_per_vbyte: int = DEFAULT_FEE_RATE_SAT_PER_VBYTE
    inputs: list[SweepInput] = field(default_factory=list)
    estimator: TxWeightEstimator = field(default_factory=TxWeightEstimator)
    total_value_sats: int = 0

    # Set by finalize().
    tx: CTransaction | None = None
    fee_sats: int = 0
    is_signed: bool = False

    def add_input(self, sweep_input: SweepInput) -> None:
        assert self.tx is None, "can't add inputs to a finalized sweep"
        self.inputs.append(sweep_input)
        self.total_value_sats += sweep_input.value_sats
        self.estimator.add_witness_input(TO_LOCAL_TIMEOUT_WITNESS_SIZE)

    @property
    def estimated_weight(self) -> int:
        return self.estimator.weight

    @property
    def output_value_sats(self) -> int:
        return self.total_value_sats - self.fee_sats

    def finalize(self) -> CTransaction:
        assert self.tx is None, "sweep already finalized"
        if not self.inputs:
            raise NoSweepableOutputs("no sweepable outputs found")

        self.estimator.add_p2wkh_output()
        fee_per_kw = fee_per_kw_from_sat_per_vbyte(self.fee_rate_sat_per_vbyte)
        self.fee_sats = fee_for_weight(fee_per_kw, self.estimated_weight)

        log.info(
            "fee %d sats of %d total amount (estimated weight %d)",
            self.fee_sats,
            self.total_value_sats,
            self.estimated_weight,
        )

        if self.output_value_sats < P2WPKH_DUST_LIMIT_SATS:
            raise InsufficientFunds(
                f"sweeping {self.total_value_sats} sats at a fee of {self.fee_sats} "
                f"sats leaves {self.output_value_sats} sats, below the dust limit "
                f"of {P2WPKH_DUST_LIMIT_SATS}"
            )

        tx = CTransaction()
        tx.version = 2
        tx.vin = [i.as_txin for i in self.inputs]
        tx.vout = [self.destination.as_vout(self.output_value_sats)]
        self.tx = tx
        return tx

    def sign(self, key_ring: "KeyRing") -> CTransaction:
        """Satisfy the delayed branch of every to_local script."""
        assert (tx := self.tx), "finalize() the sweep before signing"
        assert not self.is_signed

        sighashes = SigHashCache(tx)
        witnesses = []
        for i, sweep_input in enumerate(self.inputs):
            sig = key_ring.sign_output_raw(sighashes, i, sweep_input)

            wit = CTxInWitness()
            wit.scriptWitness.stack = [
                sig + bytes([sweep_input.hash_type]),
                b"",
                sweep_input.witness_script,
            ]
            witnesses.append(wit)

        tx.wit.vtxinwit = witnesses
        self.is_signed = True
        return tx

    def serialize(self) -> bytes:
        assert self.tx and self.is_signed
        return self.tx.serialize()

    def tohex(self) -> str:
        return self.serialize().hex()

    @property
    def txid(self) -> str:
        assert self.tx
        return self.tx.rehash()
