from dataclasses import dataclass

from verystable.core.messages import WITNESS_SCALE_FACTOR, ser_compact_size

# version + locktime
BASE_TX_SIZE = 4 + 4

# prevout txid + prevout index + empty scriptSig length + sequence
INPUT_SIZE = 32 + 4 + 1 + 4

# value + script length + OP_0 OP_DATA_20 <20-byte hash>
P2WKH_OUTPUT_SIZE = 8 + 1 + 22

# segwit marker + flag
WITNESS_HEADER_SIZE = 2

# OP_IF OP_DATA_33 <revocation key> OP_ELSE OP_DATA_4 <csv delay> OP_CSV OP_DROP
# OP_DATA_33 <delay key> OP_ENDIF OP_CHECKSIG, assuming the widest csv push.
TO_LOCAL_SCRIPT_SIZE = 1 + 1 + 33 + 1 + 1 + 4 + 1 + 1 + 1 + 33 + 1 + 1

# element count, signature (max DER + sighash flag), empty element, witness script
TO_LOCAL_TIMEOUT_WITNESS_SIZE = 1 + 1 + 73 + 1 + 1 + TO_LOCAL_SCRIPT_SIZE


def fee_per_kw_from_sat_per_vbyte(sat_per_vbyte: int) -> int:
    return sat_per_vbyte * 1000 // WITNESS_SCALE_FACTOR


def fee_for_weight(fee_per_kw: int, weight: int) -> int:
    return -(-fee_per_kw * weight // 1000)


@dataclass
class TxWeightEstimator:
    """
    Upper bound on the weight of a transaction, built up one input/output at a
    time before anything is signed.
    """

    input_count: int = 0
    output_count: int = 0
    input_size: int = 0
    output_size: int = 0
    input_witness_size: int = 0
    has_witness: bool = False

    def add_witness_input(self, witness_size: int) -> None:
        self.input_size += INPUT_SIZE
        self.input_witness_size += witness_size
        self.input_count += 1
        self.has_witness = True

    def add_p2wkh_output(self) -> None:
        self.output_size += P2WKH_OUTPUT_SIZE
        self.output_count += 1

    @property
    def weight(self) -> int:
        stripped_size = (
            BASE_TX_SIZE
            + len(ser_compact_size(self.input_count))
            + self.input_size
            + len(ser_compact_size(self.output_count))
            + self.output_size
        )
        weight = stripped_size * WITNESS_SCALE_FACTOR
        if self.has_witness:
            weight += WITNESS_HEADER_SIZE + self.input_witness_size
        return weight
