from rich import print
from verystable.core.messages import COIN


def txid_to_int(txid: str) -> int:
    return int.from_bytes(bytes.fromhex(txid), byteorder="big")


def sats_to_btc(sats: int) -> str:
    return f"{sats / COIN:.8f}"


def print_activity(*lines) -> None:
    oth = "\n     ".join(str(i) for i in lines[1:])
    print(f" {lines[0]}\n    {oth}\n")
