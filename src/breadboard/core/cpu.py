# breadboard/core/cpu.py
"""
Core Layer (抽象CPU)

プログラムメモリとデータメモリを所有し、フェッチ→デコード→実行の1ステップを駆動する基底クラス。
命令ごとの振る舞いは各アーキテクチャのInstruction Layerが担当します。
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from breadboard.common.types import DisassemblyRow, RegisterLayoutInfo
from breadboard.core.snapshot import Metadata, Operation, Snapshot
from breadboard.core.state import CpuState
from breadboard.transport.memory import ROM, DataMemory

logger = logging.getLogger(__name__)


class AbstractCpu(ABC):
    """
    ハーバード型CPUの基底クラス。
    状態の生成（reset）、プログラムメモリの消去（erase）、ステップ実行とスナップショット生成を共通化します。
    """
    # @intent:responsibility CPUの状態とメモリへの参照を初期化します。
    # @intent:pre-condition 両メモリは呼び出し元が生成し、このCPUだけが所有する必要があります。
    def __init__(self, program_memory: ROM, data_memory: DataMemory):
        self._program_memory = program_memory
        self._data_memory = data_memory
        self._state: CpuState = self._create_initial_state()
        self._step_count: int = 0

    # @intent:responsibility アーキテクチャ固有のCpuStateサブクラスを、電源投入直後の値で生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility レジスタとデータメモリを初期状態に戻します。プログラムメモリは保持します。
    def reset(self) -> None:
        """
        CPUのPC、SP、レジスタ、ステータスおよびデータメモリを初期値にリセットします。
        ロード済みのプログラムはそのまま残ります。
        """
        self._state = self._create_initial_state()
        self._data_memory.clear()
        self._step_count = 0
        logger.debug("CPU reset")

    # @intent:responsibility プログラムメモリを消去し、PCを0に戻します。
    # @intent:post-condition レジスタ、フラグ、SPは変化しません。
    def erase(self) -> None:
        self._program_memory.erase()
        self._state.pc = 0
        logger.debug("Program memory erased")

    # @intent:responsibility 全ての状態（プログラムメモリを含む）を生成直後の状態に戻します。
    def reinitialize(self) -> None:
        self.erase()
        self.reset()

    # @intent:responsibility 現在のCPUの状態のコピーを返します。
    def get_state(self) -> CpuState:
        """
        現在のCPUの状態（レジスタ値など）のコピーを返します。
        返された値を変更してもCPUには影響しません。
        """
        return copy.deepcopy(self._state)

    # @intent:responsibility 実行済みステップ数を返します。
    @property
    def step_count(self) -> int:
        return self._step_count

    # @intent:responsibility PCが指すプログラムメモリから命令語を読み出します。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからプログラムメモリの次の命令（オペコード）を読み出し、その値を返します。
        フェッチは状態を変更しません。
        """
        pass

    # @intent:responsibility 命令語をOperationに変換します。副作用を持ってはいけません。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility Operationを適用してレジスタ、フラグ、スタックを更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        """
        デコードされた命令を実行し、レジスタやフラグ、PCなどのCPUの状態を更新します。
        PCの更新（通常の前進、分岐）も実行側の責務です。
        """
        pass

    # @intent:responsibility 1命令を実行し、実行後の状態のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（フェッチ→デコード→実行→Snapshot生成）を定義します。
    #                  デコードと実行の失敗は状態を変更する前に送出されるため、失敗したステップは観測されません。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、実行後の状態を含むSnapshotオブジェクトを返します。
        """
        opcode = self._fetch()
        operation = self._decode(opcode)
        self._execute(operation)
        self._step_count += 1
        logger.debug("step %d: %s", self._step_count, operation.assembly)
        return self._create_snapshot(operation)

    def _create_snapshot(self, operation: Operation) -> Snapshot:
        return Snapshot(
            state=self.get_state(),
            operation=operation,
            metadata=Metadata(step_count=self._step_count, symbol_info=operation.assembly),
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        レジスタ名から現在値への辞書。RegisterViewが表示に使う。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        RegisterViewのグループ構成。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        フラグ名からビット状態への辞書。表示順は上位ビットから。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyRow]:
        """
        指定されたメモリ範囲を逆アセンブルし、DisassemblyRow のリストを返す。
        """
        pass
