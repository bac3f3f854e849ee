"""ピクロス (ノノグラム) ソルバーの主要な関数・クラスを公開するパッケージ用モジュール"""

from importlib import import_module
from typing import Any

__all__ = [
    "TileState",
    "GameBoard",
    "LinePlacements",
    "PicrossGame",
    "validate_board",
    "solve",
    "SolveStatus",
    "SolverVersion",
    "is_unique",
    "generate_puzzle",
]

# 公開名 -> 定義しているモジュール
_EXPORTS = {
    "TileState": ".puzzle_types",
    "GameBoard": ".board",
    "LinePlacements": ".line_iter",
    "PicrossGame": ".puzzle",
    "validate_board": ".validator",
    "solve": ".solver",
    "SolveStatus": ".solver",
    "SolverVersion": ".solver",
    "is_unique": ".sat_unique",
    "generate_puzzle": ".generator",
}


def __getattr__(name: str) -> Any:
    """必要になったタイミングで対象モジュールを読み込む"""

    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name}")
    module = import_module(module_name, __name__)
    return getattr(module, name)
