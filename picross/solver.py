# ピクロス用ソルバーの共通インターフェースと呼び出し口

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from importlib import import_module
from typing import Any, Dict, Optional, Protocol, Union

from .board import GameBoard
from .constants import DEFAULT_SOLVER_VERSION
from .puzzle import PicrossGame


class SolveStatus(Enum):
    """solve() の終了状態"""

    COMPLETE = "complete"
    # ライン単位の推論だけでは確定しきれなかった
    INCOMPLETE = "incomplete"
    # バックトラックで全探索しても解がなかった
    NO_SOLUTION = "no_solution"
    # 同じマスに塗りと空白の両方が要求された
    CONTRADICTION = "contradiction"
    # 呼び出し側が指定したステップ上限に達した
    ABORTED = "aborted"


@dataclass
class SolveResult:
    """ソルバーの実行結果を表すデータクラス"""

    status: SolveStatus
    board: GameBoard
    stats: Dict[str, int] = field(default_factory=dict)
    reason: Optional[str] = None

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.COMPLETE


class PicrossSolver(Protocol):
    """3 種類のソルバーが共通して持つ操作"""

    def set_game(self, game: PicrossGame) -> None: ...

    def solve(self) -> SolveResult: ...


class SolverVersion(Enum):
    """利用できるソルバーの種類"""

    V1 = "v1"  # バックトラック探索
    V2 = "v2"  # 不動点までの行列交互伝播
    V3 = "v3"  # 変化したラインだけを再計算する伝播


# version ごとの (モジュール名, クラス名)
_SOLVER_CLASSES = {
    SolverVersion.V1: ("solver_backtrack", "BacktrackingSolver"),
    SolverVersion.V2: ("solver_propagation", "PropagationSolver"),
    SolverVersion.V3: ("solver_worklist", "WorklistSolver"),
}


def create_solver(
    version: Union[SolverVersion, str], game: PicrossGame, **options: Any
) -> PicrossSolver:
    """version に対応するソルバーを生成する

    :param version: ``SolverVersion`` または ``"v1"`` などの文字列
    :param options: ソルバー固有の設定 (例: v1 の ``step_limit``)
    """

    version = SolverVersion(version)
    module_name, class_name = _SOLVER_CLASSES[version]
    # 各ソルバーモジュールがこのモジュールを参照するため遅延インポートする
    module = import_module(f".{module_name}", __package__)
    return getattr(module, class_name)(game, **options)


def solve(
    game: PicrossGame,
    version: Union[SolverVersion, str] = DEFAULT_SOLVER_VERSION,
    **options: Any,
) -> SolveResult:
    """指定したソルバーでパズルを解く"""
    return create_solver(version, game, **options).solve()


__all__ = [
    "SolveStatus",
    "SolveResult",
    "PicrossSolver",
    "SolverVersion",
    "create_solver",
    "solve",
]
