import hashlib

import coincurve
import pytest
from bip32 import BIP32

from ForceCloseRecord import ForceCloseRecord
from KeyDescriptor import KeyDescriptor
from KeyRing import KeyRing
from SweepConfig import SweepConfig
from keys import derive_revocation_pubkey, tweak_pubkey
from scripts import commit_script_to_self, witness_script_hash

# BIP173 example P2WPKH address and its scriptPubKey.
SWEEP_ADDR = "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"
SWEEP_SPK = bytes.fromhex("0014751e76e8199196d454941c45d1b3a323f1433bd6")

DELAY_FAMILY = 4


def _pubkey_for(label: str) -> coincurve.PublicKey:
    return coincurve.PrivateKey(hashlib.sha256(label.encode()).digest()).public_key


def to_local_spk(
    key_ring: KeyRing, delay_desc: KeyDescriptor, commit_point, revocation_base, csv
) -> bytes:
    delay_base = coincurve.PublicKey.from_secret(key_ring.fetch_privkey(delay_desc))
    witness_script = commit_script_to_self(
        csv,
        tweak_pubkey(delay_base, commit_point),
        derive_revocation_pubkey(revocation_base, commit_point),
    )
    return bytes(witness_script_hash(witness_script))


@pytest.fixture
def key_ring() -> KeyRing:
    return KeyRing(BIP32.from_seed(bytes(range(32))), "mainnet")


@pytest.fixture
def other_key_ring() -> KeyRing:
    return KeyRing(BIP32.from_seed(bytes(range(1, 33))), "mainnet")


@pytest.fixture
def config() -> SweepConfig:
    return SweepConfig(SWEEP_ADDR)


@pytest.fixture
def make_entry(key_ring):
    """
    Build the JSON entry the channel summary tooling would have exported for a
    force-closed channel whose to_local output pays `value` after `csv` blocks.
    """

    def _make_entry(
        n: int = 0,
        csv: int = 144,
        value: int = 100_000,
        local_balance: int | None = None,
        other_outs: tuple[int, ...] = (),
        record_pubkey: bool = True,
        spk: bytes | None = None,
    ) -> dict:
        delay_desc = KeyDescriptor(family=DELAY_FAMILY, index=n)
        commit_point = _pubkey_for(f"commit-{n}")
        revocation_base = _pubkey_for(f"revocation-{n}")
        delay_base = coincurve.PublicKey.from_secret(key_ring.fetch_privkey(delay_desc))

        if spk is None:
            spk = to_local_spk(key_ring, delay_desc, commit_point, revocation_base, csv)

        outs = [{"script": spk.hex(), "value": value}]
        for i, other in enumerate(other_outs):
            # to_remote output, pays somebody else.
            outs.append({"script": "0014" + f"{n:02x}{i:02x}" * 10, "value": other})

        delay_basepoint = {"family": DELAY_FAMILY, "index": n}
        if record_pubkey:
            delay_basepoint["pubkey"] = delay_base.format().hex()

        return {
            "channel_point": f"{n:064x}:0",
            "local_balance": value if local_balance is None else local_balance,
            "closing_tx": {"txid": f"{n + 1:064x}", "all_outputs_spent": False},
            "force_close": {
                "txid": f"{n + 1:064x}",
                "csv_delay": 0,
                "commit_point": commit_point.format().hex(),
                "revocation_basepoint": {"pubkey": revocation_base.format().hex()},
                "delay_basepoint": delay_basepoint,
                "outs": outs,
            },
        }

    return _make_entry


@pytest.fixture
def make_record(make_entry):
    def _make_record(**kwargs) -> ForceCloseRecord:
        return ForceCloseRecord.from_json(make_entry(**kwargs))

    return _make_record
