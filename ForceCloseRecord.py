import json
from dataclasses import dataclass, field
from pathlib import Path

from KeyDescriptor import KeyDescriptor
from OutputDescriptor import OutputDescriptor
from logger_config import log

HEXDIGITS = set("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class ForceClose:
    """What we know about our own commitment transaction that hit the chain."""

    txid: str
    commit_point: str
    revocation_base_point: KeyDescriptor
    delay_base_point: KeyDescriptor
    outs: list[OutputDescriptor] = field(default_factory=list)

    # As recorded by the channel DB. Not trusted; we brute force the real value.
    csv_delay: int = 0

    def __post_init__(self) -> None:
        if len(self.txid) != 64 or not all(c in HEXDIGITS for c in self.txid):
            raise ValueError(f"invalid force close txid {self.txid!r}")

    @classmethod
    def from_json(cls, obj: dict) -> "ForceClose":
        return cls(
            txid=obj["txid"],
            commit_point=obj.get("commit_point", ""),
            revocation_base_point=KeyDescriptor.from_json(
                obj.get("revocation_basepoint")
            ),
            delay_base_point=KeyDescriptor.from_json(obj.get("delay_basepoint")),
            outs=[
                OutputDescriptor.from_json(i, out)
                for i, out in enumerate(obj.get("outs") or [])
            ],
            csv_delay=int(obj.get("csv_delay", 0)),
        )


@dataclass(frozen=True)
class ClosingTx:
    txid: str = ""
    all_outputs_spent: bool = False

    @classmethod
    def from_json(cls, obj: dict) -> "ClosingTx":
        return cls(
            txid=obj.get("txid", ""),
            all_outputs_spent=bool(obj.get("all_outputs_spent", False)),
        )


@dataclass(frozen=True)
class ForceCloseRecord:
    """
    One channel's historical state, as exported by the channel summary tooling.
    Read-only; the sweep never modifies it.
    """

    channel_point: str
    local_balance: int
    force_close: ForceClose | None = None
    closing_tx: ClosingTx | None = None

    @classmethod
    def from_json(cls, obj: dict) -> "ForceCloseRecord":
        fc = obj.get("force_close")
        closing = obj.get("closing_tx")
        return cls(
            channel_point=obj.get("channel_point", ""),
            local_balance=int(obj.get("local_balance", 0)),
            force_close=ForceClose.from_json(fc) if fc else None,
            closing_tx=ClosingTx.from_json(closing) if closing else None,
        )

    def __str__(self) -> str:
        return self.channel_point


def load_records(filepath: Path | str) -> list[ForceCloseRecord]:
    """
    Load channel entries from a summary JSON file. Accepts either an object with a
    `channels` list or a bare list of entries.
    """
    if not isinstance(filepath, Path):
        filepath = Path(filepath)

    try:
        obj = json.loads(filepath.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"{filepath} is not valid JSON: {e}") from e

    if isinstance(obj, dict):
        obj = obj.get("channels")
    if not isinstance(obj, list):
        raise ValueError(f"{filepath} doesn't contain a list of channels")

    try:
        records = [ForceCloseRecord.from_json(entry) for entry in obj]
    except (KeyError, TypeError) as e:
        raise ValueError(f"malformed channel entry in {filepath}: {e!r}") from e
    log.info("loaded %d channel entries from %s", len(records), filepath)
    return records
