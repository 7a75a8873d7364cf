from dataclasses import dataclass

from config import LND_KEY_PURPOSE


@dataclass(frozen=True)
class KeyDescriptor:
    """
    Locates a channel key inside the node's key-family tree. The pubkey is whatever
    the channel database recorded for it, if anything.
    """

    family: int = 0
    index: int = 0
    pubkey: str = ""

    def path(self, coin_type: int) -> str:
        return f"m/{LND_KEY_PURPOSE}h/{coin_type}h/{self.family}h/0/{self.index}"

    @classmethod
    def from_json(cls, obj: dict | None) -> "KeyDescriptor":
        obj = obj or {}
        return cls(
            family=int(obj.get("family", 0)),
            index=int(obj.get("index", 0)),
            pubkey=obj.get("pubkey", ""),
        )
