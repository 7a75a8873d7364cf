from ForceCloseRecord import ForceCloseRecord
from KeyRing import KeyRing
from OutputDescriptor import OutputDescriptor
from Publisher import Publisher
from SweepConfig import SweepConfig
from SweepInput import SweepInput
from SweepResult import SkippedRecord, SweepResult
from SweepTransaction import SweepTransaction
from errors import NoRecordsError, OutputNotFound, PublishError, RecordSkipped
from keys import derive_keys
from logger_config import log
from scripts import lock_time_to_sequence, recover_script


def select_output(record: ForceCloseRecord) -> OutputDescriptor | None:
    """
    Find the to_local output of the record's commitment transaction.

    Returns None if there's nothing to sweep; raises OutputNotFound if there should
    be something but we can't tell which output it is.
    """
    if (
        not (fc := record.force_close)
        or (record.closing_tx and record.closing_tx.all_outputs_spent)
        or record.local_balance == 0
    ):
        return None

    if len(fc.outs) == 1:
        out = fc.outs[0]
        if out.value_sats != record.local_balance:
            # Recorded balances can be slightly off; the script check decides.
            log.warning(
                "potential value mismatch! %d vs %d (%s)",
                out.value_sats,
                record.local_balance,
                record.channel_point,
            )
        return out

    matching = [out for out in fc.outs if out.value_sats == record.local_balance]
    if not matching:
        raise OutputNotFound(
            f"none of {len(fc.outs)} outputs of {fc.txid} carry the local balance "
            f"of {record.local_balance} sats"
        )
    return matching[-1]


def resolve_record(
    key_ring: KeyRing, record: ForceCloseRecord, max_csv_limit: int
) -> SweepInput | None:
    """Turn one channel record into a signable input, or None if it has nothing."""
    if not (out := select_output(record)):
        return None

    assert (fc := record.force_close)
    keys = derive_keys(key_ring, record)

    # The channel DB's csv delay can't be relied on, but brute forcing it is cheap.
    recovered = recover_script(
        keys.tweaked_delay_pubkey,
        keys.revocation_pubkey,
        out.script,
        max_csv_limit,
    )
    if fc.csv_delay and fc.csv_delay != recovered.csv_delay:
        log.info(
            "channel %s recorded csv delay %d but the script uses %d",
            record.channel_point,
            fc.csv_delay,
            recovered.csv_delay,
        )

    return SweepInput(
        channel_point=record.channel_point,
        outpoint=out.coutpoint(fc.txid),
        value_sats=out.value_sats,
        recovered=recovered,
        key_desc=fc.delay_base_point,
        single_tweak=keys.single_tweak,
        sequence=lock_time_to_sequence(False, recovered.csv_delay),
    )


def sweep_timelock(
    key_ring: KeyRing,
    records: list[ForceCloseRecord],
    config: SweepConfig,
    publisher: Publisher | None = None,
) -> SweepResult:
    """
    Sweep the to_local outputs of every force-closed channel in `records` into one
    transaction paying `config.sweep_addr`.

    Problems with a single record are logged and that record is left out. Anything
    else aborts the run before a signature is produced.
    """
    # Fail on a bad sweep address before doing any work.
    destination = config.destination
    if not records:
        raise NoRecordsError("no channel entries to sweep")

    sweep = SweepTransaction(destination, config.fee_rate)
    result = SweepResult(sweep)

    for record in records:
        try:
            sweep_input = resolve_record(key_ring, record, config.max_csv_limit)
        except RecordSkipped as e:
            log.warning("not sweeping %s, %s: %s", record.channel_point, e.reason, e)
            result.skipped.append(SkippedRecord(record.channel_point, e.reason, str(e)))
            continue

        if not sweep_input:
            log.info("not sweeping %s, info missing or all spent", record.channel_point)
            result.skipped.append(
                SkippedRecord(record.channel_point, "nothing to sweep")
            )
            continue

        log.info("sweeping %s", sweep_input)
        sweep.add_input(sweep_input)

    sweep.finalize()
    sweep.sign(key_ring)
    raw_tx_hex = sweep.tohex()
    log.info("transaction: %s", raw_tx_hex)

    if config.publish:
        assert publisher, "publish requested without a publisher"
        try:
            result.publish_response = publisher.publish(raw_tx_hex)
        except PublishError as e:
            e.raw_tx_hex = raw_tx_hex
            raise
        log.info("published tx %s, response: %s", sweep.txid, result.publish_response)

    return result
