# tests/core/test_snapshot.py
"""
breadboard.core.snapshotモジュールの単体テスト。
"""
import dataclasses

import pytest

from breadboard.core.state import CpuState
from breadboard.core.snapshot import Operation, Metadata, Snapshot

# @intent:test_suite デコード済み命令と実行結果を記録する不変データ構造の検証。

class TestOperation:
    # @intent:test_case_init_with_operands オペランド付きの命令が表示用の表記を組み立てられることを検証します。
    def test_assembly_with_operands(self):
        op = Operation(opcode_hex="0F01", mnemonic="ADD", operands=["R16", "R17"], dest=16, src=17)
        assert op.assembly == "ADD R16, R17"
        assert op.length == 2

    def test_assembly_without_operands(self):
        op = Operation(opcode_hex="9508", mnemonic="RET")
        assert op.operands == []
        assert op.assembly == "RET"
        assert op.dest is None and op.offset is None

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_immutability(self):
        op = Operation(opcode_hex="0000", mnemonic="NOP")
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.mnemonic = "RET"


class TestSnapshot:
    def test_fields(self):
        state = CpuState(pc=2, sp=0x3FF)
        op = Operation(opcode_hex="0000", mnemonic="NOP")
        snapshot = Snapshot(state=state, operation=op, metadata=Metadata(step_count=1, symbol_info="NOP"))
        assert snapshot.state.pc == 2
        assert snapshot.metadata.step_count == 1
        assert snapshot.metadata.symbol_info == "NOP"

    def test_immutability(self):
        snapshot = Snapshot(
            state=CpuState(), operation=Operation("0000", "NOP"), metadata=Metadata(step_count=0)
        )
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.metadata = Metadata(step_count=5)
