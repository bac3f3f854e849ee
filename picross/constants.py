"""共通定数や簡易ヘルパー関数を定義するモジュール"""

from __future__ import annotations

# バックトラック探索で取り出すフレーム数の既定上限
DEFAULT_SOLVER_STEP_LIMIT = 500000

# solve() で version を省略したときに使うソルバー
DEFAULT_SOLVER_VERSION = "v3"

# ルールテキストで行ブロックと列ブロックを区切る行
RULES_SEPARATOR = "-----"

# render() で使う文字。キーは TileState の値
TILE_CHARS = {0: " ", 1: "x", 2: "?"}

# JSON スキーマのバージョン
SCHEMA_VERSION = "1.0"


def _evaluate_difficulty(line_solvable: bool, steps: int, depth: int) -> str:
    """ソルバー統計から難易度を推定する関数"""

    # ライン単位の推論だけで解ける盤面は手数で easy / normal に分ける
    if line_solvable:
        if steps < 50:
            return "easy"
        return "normal"
    # 探索が必要な盤面はバックトラックの手数で判断する
    if steps < 10000 and depth <= 30:
        return "hard"
    return "expert"


__all__ = [
    "DEFAULT_SOLVER_STEP_LIMIT",
    "DEFAULT_SOLVER_VERSION",
    "RULES_SEPARATOR",
    "TILE_CHARS",
    "SCHEMA_VERSION",
    "_evaluate_difficulty",
]
