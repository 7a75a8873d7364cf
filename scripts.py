import hashlib
import typing as t

import coincurve
from verystable.core import script
from verystable.core.script import CScript

from RecoveredScript import RecoveredScript
from errors import InvalidScriptLength, ScriptNotFound

# OP_0 <32-byte hash>
P2WSH_SCRIPT_LEN = 34

# Only this much of the scriptPubKey is compared during the search.
SCRIPT_PREFIX_LEN = 8

SEQUENCE_LOCKTIME_SECONDS = 1 << 22
SEQUENCE_LOCKTIME_GRANULARITY = 9

ScriptBuilder = t.Callable[[int, coincurve.PublicKey, coincurve.PublicKey], CScript]


def commit_script_to_self(
    csv_delay: int,
    delay_pubkey: coincurve.PublicKey,
    revocation_pubkey: coincurve.PublicKey,
) -> CScript:
    """
    The to_local output script of a commitment transaction: spendable by the
    revocation key right away, or by the delayed key after `csv_delay` blocks.
    """
    return CScript(
        [
            script.OP_IF,
            revocation_pubkey.format(),
            script.OP_ELSE,
            csv_delay,
            script.OP_CHECKSEQUENCEVERIFY,
            script.OP_DROP,
            delay_pubkey.format(),
            script.OP_ENDIF,
            script.OP_CHECKSIG,
        ]
    )  # yapf: disable


def witness_script_hash(witness_script: bytes) -> CScript:
    return CScript([script.OP_0, hashlib.sha256(witness_script).digest()])


def lock_time_to_sequence(is_seconds: bool, locktime: int) -> int:
    """Encode a relative lock time as an input's nSequence (BIP68)."""
    if not is_seconds:
        return locktime
    return SEQUENCE_LOCKTIME_SECONDS | (locktime >> SEQUENCE_LOCKTIME_GRANULARITY)


def recover_script(
    delay_pubkey: coincurve.PublicKey,
    revocation_pubkey: coincurve.PublicKey,
    target_script: bytes,
    max_csv: int,
    make_script: ScriptBuilder = commit_script_to_self,
) -> RecoveredScript:
    """
    Find the CSV delay that, together with the two keys, hashes to `target_script`.

    Channel databases don't reliably record the delay, but the space is small, so
    try every value in [0, max_csv] and take the lowest one that matches.
    """
    if len(target_script) != P2WSH_SCRIPT_LEN:
        raise InvalidScriptLength(
            f"invalid target script {bytes(target_script).hex()}: expected "
            f"{P2WSH_SCRIPT_LEN} bytes, got {len(target_script)}"
        )

    prefix = bytes(target_script[:SCRIPT_PREFIX_LEN])
    for csv_delay in range(max_csv + 1):
        witness_script = make_script(csv_delay, delay_pubkey, revocation_pubkey)
        script_hash = witness_script_hash(witness_script)
        if bytes(script_hash[:SCRIPT_PREFIX_LEN]) == prefix:
            return RecoveredScript(csv_delay, witness_script, script_hash)

    raise ScriptNotFound(
        f"csv timeout not found (tried up to {max_csv}) for target script "
        f"{bytes(target_script).hex()}"
    )
