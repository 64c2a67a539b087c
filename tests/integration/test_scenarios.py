from __future__ import annotations

from pathlib import Path

import pytest

from tx_ledger.adapters.input_source import CsvInputSource
from tx_ledger.adapters.output_sink import FileOutputSink
from tx_ledger.config.loader import load_config
from tx_ledger.domain.errors import InsufficientFunds
from tx_ledger.kernel.composition_root import AppRuntime, build_runtime

HEADER = "client,available,held,total,locked"


def _runtime(tmp_path: Path, *, policy: str = "skip") -> tuple[AppRuntime, Path]:
    config = load_config()
    config.ledger.on_insufficient_funds = policy  # type: ignore[assignment]
    output_path = tmp_path / "accounts.csv"
    runtime = build_runtime(
        config=config,
        wiring={"output_sink": FileOutputSink(output_path, atomic_replace=True)},
        run_id="integration",
    )
    return runtime, output_path


def _run(tmp_path: Path, text: str, *, policy: str = "skip") -> list[str]:
    input_path = tmp_path / "transactions.csv"
    input_path.write_text(text, encoding="utf-8")
    runtime, output_path = _runtime(tmp_path, policy=policy)
    try:
        runtime.run(CsvInputSource(input_path).read())
    finally:
        runtime.close()
    return output_path.read_text(encoding="utf-8").splitlines()


def test_basic_deposits_and_withdrawals(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type, client, tx, amount\n"
        "deposit, 1, 1, 1.0\n"
        "deposit, 2, 2, 2.0\n"
        "deposit, 1, 3, 2.0\n"
        "withdrawal, 1, 4, 1.5\n"
        "withdrawal, 2, 5, 3.0\n",
    )
    assert lines == [
        HEADER,
        "1,1.5000,0.0000,1.5000,false",
        "2,2.0000,0.0000,2.0000,false",
    ]


def test_dispute_then_resolve_restores_available(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type,client,tx,amount\n"
        "deposit,1,1,5.0\n"
        "deposit,1,2,2.5\n"
        "dispute,1,1,\n"
        "resolve,1,1\n",
    )
    assert lines == [HEADER, "1,7.5000,0.0000,7.5000,false"]


def test_chargeback_locks_account_and_freezes_it(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type,client,tx,amount\n"
        "deposit,3,10,4.0\n"
        "deposit,3,11,1.25\n"
        "dispute,3,10\n"
        "chargeback,3,10\n"
        "deposit,3,12,100.0\n"
        "withdrawal,3,13,1.0\n",
    )
    assert lines == [HEADER, "3,1.2500,0.0000,1.2500,true"]


def test_pending_dispute_holds_funds(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type,client,tx,amount\n"
        "deposit,1,1,10.0\n"
        "dispute,1,1\n"
        "withdrawal,1,2,1.0\n",
    )
    assert lines == [HEADER, "1,0.0000,10.0000,10.0000,false"]


def test_dispute_exceeding_available_is_ignored(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type,client,tx,amount\n"
        "deposit,1,1,10.0\n"
        "withdrawal,1,2,15.0\n"
        "withdrawal,1,3,3.0\n"
        "dispute,1,1\n",
    )
    assert lines == [HEADER, "1,7.0000,0.0000,7.0000,false"]


def test_references_to_unknown_transactions_are_ignored(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type,client,tx,amount\n"
        "deposit,1,1,1.0\n"
        "dispute,1,99\n"
        "resolve,1,1\n"
        "chargeback,1,1\n"
        "dispute,2,1\n",
    )
    assert lines == [
        HEADER,
        "1,1.0000,0.0000,1.0000,false",
        "2,0.0000,0.0000,0.0000,false",
    ]


def test_short_fractions_are_padded(tmp_path: Path) -> None:
    lines = _run(
        tmp_path,
        "type,client,tx,amount\n"
        "deposit,7,1,0.1\n"
        "deposit,7,2,0.02\n"
        "deposit,7,3,0.0003\n"
        "deposit,7,4,12\n",
    )
    assert lines == [HEADER, "7,12.1203,0.0000,12.1203,false"]


def test_abort_policy_leaves_no_output_file(tmp_path: Path) -> None:
    with pytest.raises(InsufficientFunds):
        _run(
            tmp_path,
            "type,client,tx,amount\n"
            "deposit,1,1,1.0\n"
            "withdrawal,1,2,2.0\n",
            policy="abort",
        )
    assert not (tmp_path / "accounts.csv").exists()
    assert not (tmp_path / "accounts.csv.tmp").exists()
