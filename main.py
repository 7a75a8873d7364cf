#!/usr/bin/env python3
import getpass
import sys

from clii import App
from rich import print
from verystable.rpc import BitcoinRPC

from ForceCloseRecord import load_records
from KeyRing import KeyRing
from Publisher import ExplorerAPI, RpcPublisher
from SweepConfig import SweepConfig
from config import (
    BITCOIN_RPC_URL,
    DEFAULT_CSV_LIMIT,
    DEFAULT_FEE_RATE_SAT_PER_VBYTE,
    ESPLORA_API_URL,
)
from errors import PublishError, SweepError
from logger_config import log
from sweep_actions import sweep_timelock
from utils import print_activity, sats_to_btc

cli = App()


@cli.main
@cli.cmd
def sweeptimelock(
    records: str = "./results/summary.json",
    sweep_addr: str = "",
    rootkey: str = "",
    max_csv_limit: int = DEFAULT_CSV_LIMIT,
    fee_rate: int = DEFAULT_FEE_RATE_SAT_PER_VBYTE,
    publish: bool = False,
    api_url: str = ESPLORA_API_URL,
    network: str = "mainnet",
    rpc: bool = False,
):
    """
    Sweep the force-closed state after the time lock has expired.
    """
    try:
        config = SweepConfig(
            sweep_addr,
            max_csv_limit=max_csv_limit,
            fee_rate=fee_rate,
            publish=publish,
            api_url=api_url,
            network=network,
        )
        entries = load_records(records)
    except (SweepError, ValueError, OSError) as e:
        log.error("%s", e)
        sys.exit(1)

    if not rootkey:
        rootkey = getpass.getpass("Enter extended root key (xprv/tprv): ")

    if rpc:
        publisher = RpcPublisher(BitcoinRPC(net_name=network, service_url=BITCOIN_RPC_URL))
    else:
        publisher = ExplorerAPI(config.api_url)

    try:
        key_ring = KeyRing.from_xpriv(rootkey, network)
        result = sweep_timelock(key_ring, entries, config, publisher)
    except PublishError as e:
        log.error("%s", e)
        print_activity(
            "[yellow bold]!![/] failed to publish the sweep transaction",
            "publish the signed transaction below manually",
        )
        sys.stdout.write(e.raw_tx_hex + "\n")
        sys.exit(1)
    except SweepError as e:
        log.error("%s", e)
        sys.exit(1)

    for skipped in result.skipped:
        print_activity(
            f"[yellow]--[/] skipped {skipped.channel_point}",
            skipped.reason,
            *([skipped.detail] if skipped.detail else []),
        )

    print_activity(
        f"[green bold]$$[/] sweeping {len(result.swept)} outputs",
        *(str(i) for i in result.swept),
    )
    print_activity(
        "[bold]fee[/]",
        f"{result.fee_sats} sats at {config.fee_rate} sat/vB "
        f"(estimated weight {result.estimated_weight})",
        f"sweeping {sats_to_btc(result.sweep.output_value_sats)} BTC "
        f"to {config.sweep_addr}",
    )
    if result.publish_response is not None:
        print_activity("[cyan bold]=>[/] published", result.publish_response)

    print(f"txid: {result.txid}")
    # Plain write so rich doesn't fold the hex at the terminal width.
    sys.stdout.write(result.raw_tx_hex + "\n")


if __name__ == "__main__":
    cli.run()
