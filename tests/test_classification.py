import pytest
from hypothesis import given
from hypothesis.strategies import integers

from bridgeflow.domain.classification import classify, classify_all
from bridgeflow.domain.models import EventLog

from conftest import INPUT_TOKEN, RECIPIENT, SENDER, make_log

ENI = 173


def test_inflow_to_target():
    log = make_log(42, b"r=1&c=173&x=9", amount=5, log_index=3, tx_hash="0xabc")
    rec = classify(log, ENI, "inflow")
    assert rec is not None
    assert rec.is_deposit is True
    assert rec.tx_hash == "0xabc"
    assert rec.block_number == 42
    assert rec.log_index == 3
    assert rec.from_addr.lower() == SENDER
    assert rec.to_addr.lower() == RECIPIENT
    assert rec.token.lower() == INPUT_TOKEN
    assert rec.amount == 5


def test_outflow_skips_target_destination():
    assert classify(make_log(42, b"r=1&c=173&x=9"), ENI, "outflow") is None


def test_outflow_other_destination():
    rec = classify(make_log(42, b"c=1"), ENI, "outflow")
    assert rec is not None and rec.is_deposit is False


def test_inflow_skips_other_destination():
    assert classify(make_log(42, b"c=1"), ENI, "inflow") is None


@pytest.mark.parametrize("payload", [b"xyz", b"", b"r=1&x=173", b"abc=173"])
def test_unknown_destination_fails_closed(payload):
    log = make_log(7, payload)
    assert classify(log, ENI, "inflow") is None
    assert classify(log, ENI, "outflow") is None


def test_undecodable_log_is_skipped():
    log = make_log(7)
    junk = EventLog(log.address, log.topics[:1], "0x", log.block_number, log.tx_hash, log.log_index)
    assert classify(junk, ENI, "inflow") is None
    assert classify(junk, ENI, "outflow") is None


@given(dest=integers(0, 10**6), target=integers(0, 10**6))
def test_direction_partition(dest: int, target: int):
    log = make_log(1, f"c={dest}".encode())
    inflow = classify(log, target, "inflow")
    outflow = classify(log, target, "outflow")
    assert (inflow is not None) == (dest == target)
    assert (outflow is not None) == (dest != target)
    assert not (inflow is not None and outflow is not None)


def test_unknown_direction_rejected():
    with pytest.raises(ValueError):
        classify(make_log(1), ENI, "sideways")  # type: ignore[arg-type]


def test_classify_all_keeps_order_and_filters():
    logs = [
        make_log(1, b"c=173", log_index=0),
        make_log(1, b"c=1", log_index=1),
        make_log(2, b"xyz"),
        make_log(3, b"?c=173"),
    ]
    recs = classify_all(logs, ENI, "inflow")
    assert [(r.block_number, r.log_index) for r in recs] == [(1, 0), (3, 0)]


def test_record_to_dict():
    rec = classify(make_log(9, b"c=173", amount=2**200), ENI, "inflow")
    d = rec.to_dict()
    assert set(d) == {"txHash", "blockNumber", "from", "to", "token", "amount", "isDeposit"}
    assert d["amount"] == 2**200
    assert d["isDeposit"] is True
