from dataclasses import dataclass

from bip32 import BIP32
from verystable.core.key import ECKey

from KeyDescriptor import KeyDescriptor
from SigHashCache import SigHashCache
from SweepInput import SweepInput
from config import NETWORK_COIN_TYPES
from errors import KeyDerivationError, KeyParseError, SigningError
from keys import tweak_privkey

HARDENED_INDEX = 0x80000000


@dataclass
class KeyRing:
    """
    Derives channel private keys on demand from the node's BIP32 root key. Nothing
    derived here is persisted.
    """

    root: BIP32
    network: str = "mainnet"

    def __post_init__(self) -> None:
        if self.network not in NETWORK_COIN_TYPES:
            raise ValueError(f"unknown network {self.network!r}")

    @classmethod
    def from_xpriv(cls, xpriv: str, network: str = "mainnet") -> "KeyRing":
        try:
            root = BIP32.from_xpriv(xpriv.strip())
        except ValueError as e:
            raise KeyParseError(f"error parsing root key: {e}") from e
        return cls(root, network)

    @property
    def coin_type(self) -> int:
        return NETWORK_COIN_TYPES[self.network]

    def fetch_privkey(self, desc: KeyDescriptor) -> bytes:
        path = desc.path(self.coin_type)
        if not (0 <= desc.family < HARDENED_INDEX and 0 <= desc.index < HARDENED_INDEX):
            raise KeyDerivationError(f"key locator out of range: {path}")
        try:
            return self.root.get_privkey_from_path(path)
        except ValueError as e:
            raise KeyDerivationError(f"error deriving key at {path}: {e}") from e

    def sign_output_raw(
        self, sighashes: SigHashCache, input_index: int, sweep_input: SweepInput
    ) -> bytes:
        """Return a DER signature (without the sighash flag) for one input."""
        privkey = self.fetch_privkey(sweep_input.key_desc)
        try:
            if sweep_input.single_tweak:
                privkey = tweak_privkey(privkey, sweep_input.single_tweak)
            sigmsg = sighashes.segwit_v0(
                sweep_input.witness_script,
                input_index,
                sweep_input.output.nValue,
                sweep_input.hash_type,
            )
        except ValueError as e:
            raise SigningError(f"error signing {sweep_input}: {e}") from e

        (key := ECKey()).set(privkey, compressed=True)
        if not key.is_valid:
            raise SigningError(f"invalid signing key for {sweep_input}")

        return key.sign_ecdsa(sigmsg)
