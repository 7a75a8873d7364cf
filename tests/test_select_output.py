import logging

import pytest

from ForceCloseRecord import ForceCloseRecord
from errors import OutputNotFound
from sweep_actions import select_output


def test_no_force_close_data(make_entry):
    entry = make_entry()
    del entry["force_close"]
    assert select_output(ForceCloseRecord.from_json(entry)) is None


def test_all_outputs_spent(make_entry):
    entry = make_entry()
    entry["closing_tx"]["all_outputs_spent"] = True
    assert select_output(ForceCloseRecord.from_json(entry)) is None


def test_zero_local_balance(make_record):
    assert select_output(make_record(local_balance=0)) is None


def test_single_output(make_record):
    out = select_output(make_record(value=100_000))
    assert out.index == 0
    assert out.value_sats == 100_000


def test_single_output_value_mismatch_is_tolerated(make_record, caplog):
    record = make_record(value=100_000, local_balance=99_000)
    with caplog.at_level(logging.WARNING, logger="timelock-sweep"):
        out = select_output(record)

    assert out.value_sats == 100_000
    assert "value mismatch" in caplog.text
    assert record.channel_point in caplog.text


def test_multiple_outputs_picks_local_balance(make_record):
    record = make_record(value=70_000, other_outs=(30_000, 1_000))
    out = select_output(record)
    assert out.index == 0
    assert out.value_sats == 70_000


def test_multiple_outputs_position_matters(make_entry):
    entry = make_entry(value=70_000, other_outs=(30_000,))
    outs = entry["force_close"]["outs"]
    outs.reverse()

    out = select_output(ForceCloseRecord.from_json(entry))
    assert out.index == 1
    assert out.value_sats == 70_000


def test_multiple_outputs_no_match(make_record):
    record = make_record(value=70_000, local_balance=69_999, other_outs=(30_000,))
    with pytest.raises(OutputNotFound):
        select_output(record)
