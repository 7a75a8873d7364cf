"""
Channel key derivation for the to_local output of our own commitment transaction.

Every per-commitment key is a basepoint tweaked with the commitment point:

    pubkey  = basepoint + SHA256(per_commitment_point || basepoint) * G
    privkey = basepoint_secret + SHA256(per_commitment_point || basepoint)

and the revocation key blinds the counterparty's revocation basepoint with our
commitment point:

    revocationpubkey = revocation_basepoint * SHA256(revocation_basepoint || per_commitment_point)
                       + per_commitment_point * SHA256(per_commitment_point || revocation_basepoint)

The same `single_tweak_bytes` feeds both the public key that goes into the script
and the private key we sign with, so they can't drift apart.
"""
import hashlib
import typing as t
from dataclasses import dataclass

import coincurve

from ForceCloseRecord import ForceCloseRecord
from errors import DelayBaseKeyMismatch, KeyParseError

if t.TYPE_CHECKING:
    from KeyRing import KeyRing


def pubkey_from_hex(pubkey_hex: str) -> coincurve.PublicKey:
    try:
        point = bytes.fromhex(pubkey_hex)
    except ValueError as e:
        raise KeyParseError(f"error hex decoding pub key {pubkey_hex!r}: {e}") from e

    if len(point) != 33:
        raise KeyParseError(f"expected a compressed pub key, got {pubkey_hex!r}")

    try:
        return coincurve.PublicKey(point)
    except ValueError as e:
        raise KeyParseError(f"invalid pub key {pubkey_hex}: {e}") from e


def single_tweak_bytes(
    commit_point: coincurve.PublicKey, base_point: coincurve.PublicKey
) -> bytes:
    return hashlib.sha256(commit_point.format() + base_point.format()).digest()


def tweak_pubkey(
    base_point: coincurve.PublicKey, commit_point: coincurve.PublicKey
) -> coincurve.PublicKey:
    return base_point.add(single_tweak_bytes(commit_point, base_point))


def tweak_privkey(base_secret: bytes, single_tweak: bytes) -> bytes:
    return coincurve.PrivateKey(base_secret).add(single_tweak).secret


def derive_revocation_pubkey(
    revocation_base: coincurve.PublicKey, commit_point: coincurve.PublicKey
) -> coincurve.PublicKey:
    rev_tweak = hashlib.sha256(
        revocation_base.format() + commit_point.format()
    ).digest()
    commit_tweak = hashlib.sha256(
        commit_point.format() + revocation_base.format()
    ).digest()
    return coincurve.PublicKey.combine_keys(
        [revocation_base.multiply(rev_tweak), commit_point.multiply(commit_tweak)]
    )


@dataclass(frozen=True)
class DerivedKeys:
    commit_point: coincurve.PublicKey
    delay_base_pubkey: coincurve.PublicKey
    revocation_pubkey: coincurve.PublicKey
    tweaked_delay_pubkey: coincurve.PublicKey
    delay_privkey: bytes
    single_tweak: bytes


def derive_keys(key_ring: "KeyRing", record: ForceCloseRecord) -> DerivedKeys:
    """
    Compute the keys needed to rebuild and spend the to_local script of `record`.

    Raises KeyParseError / KeyDerivationError for broken inputs, which are fatal,
    and DelayBaseKeyMismatch when the root key plainly isn't the one that opened
    this channel.
    """
    assert (fc := record.force_close)

    commit_point = pubkey_from_hex(fc.commit_point)
    revocation_base = pubkey_from_hex(fc.revocation_base_point.pubkey)

    delay_privkey = key_ring.fetch_privkey(fc.delay_base_point)
    delay_base = coincurve.PublicKey.from_secret(delay_privkey)

    recorded = fc.delay_base_point.pubkey.lower()
    if recorded and recorded != delay_base.format().hex():
        raise DelayBaseKeyMismatch(
            f"derived delay base key {delay_base.format().hex()} but channel "
            f"recorded {recorded}; wrong root key?"
        )

    return DerivedKeys(
        commit_point=commit_point,
        delay_base_pubkey=delay_base,
        revocation_pubkey=derive_revocation_pubkey(revocation_base, commit_point),
        tweaked_delay_pubkey=tweak_pubkey(delay_base, commit_point),
        delay_privkey=delay_privkey,
        single_tweak=single_tweak_bytes(commit_point, delay_base),
    )
