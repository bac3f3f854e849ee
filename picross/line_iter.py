"""1 本のライン (行または列) に対するブロック配置を列挙するモジュール

ヒント数字列 ``rule`` と幅 ``width`` から、条件を満たすすべての
ラインを深さ優先で生成する。ソルバーはこの列挙結果の共通部分
(どの配置でも同じ状態になるマス) を使って盤面を確定させていく。
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import ContradictionError, DimensionMismatchError
from .puzzle_io import validate_line_rule
from .puzzle_types import Line, LineRule, Segment, TileState

_FILLED = TileState.FILLED
_EMPTY = TileState.EMPTY
_UNDETERMINED = TileState.UNDETERMINED


def count_placements(rule: Sequence[int], width: int) -> int:
    """配置数を星と棒の公式 ``C(width - sum + 1, k)`` で求める"""

    runs = validate_line_rule(rule)
    if runs == (0,):
        return 1
    n = width - sum(runs) + 1
    if n < 0:
        return 0
    # k > n のとき math.comb は 0 を返す
    return math.comb(n, len(runs))


def build_line_from_segments(segments: Iterable[Segment], width: int) -> Line:
    """ブロック位置の一覧から塗り/空白だけのラインを作る"""
    cells = [_EMPTY] * width
    for seg in segments:
        if seg.index < 0 or seg.end > width:
            raise DimensionMismatchError(f"segment {seg} does not fit in width {width}")
        for i in range(seg.index, seg.end):
            cells[i] = _FILLED
    return tuple(cells)


def _conflicts(candidate: Line, reference: Line) -> bool:
    """候補が既知のマスと食い違うか調べる"""
    for cand, ref in zip(candidate, reference):
        if ref != _UNDETERMINED and cand != ref:
            return True
    return False


def _fold(acc: List[TileState], candidate: Line) -> bool:
    """``acc`` を候補と重ね合わせる。全マス未確定になったら True を返す"""
    all_undetermined = True
    for i, cand in enumerate(candidate):
        if acc[i] != cand:
            acc[i] = _UNDETERMINED
        if acc[i] != _UNDETERMINED:
            all_undetermined = False
    return all_undetermined


class LinePlacements:
    """ヒントに合うラインを左詰めの配置から順に列挙するイテラブル

    ``iter()`` を呼ぶたびに最初から列挙し直すので、同じインスタンスを
    何度でも走査できる。探索は再帰ではなく明示的なスタックで行う。
    """

    def __init__(self, rule: Sequence[int], width: int) -> None:
        if width < 0:
            raise DimensionMismatchError("width は 0 以上を指定してください")
        # 空のヒントは (0,) になり、複数ブロック中の 0 は ParseError
        self.rule: LineRule = validate_line_rule(rule)
        self.width = width

        # suffix_min[i] は i 番目以降のブロックを置くのに必要な最小幅
        runs = self.rule
        suffix_min = [0] * (len(runs) + 1)
        for i in range(len(runs) - 1, -1, -1):
            gap = 1 if i + 1 < len(runs) else 0
            suffix_min[i] = runs[i] + gap + suffix_min[i + 1]
        self._suffix_min = suffix_min

    def __len__(self) -> int:
        return count_placements(self.rule, self.width)

    def __repr__(self) -> str:
        return f"LinePlacements(rule={self.rule!r}, width={self.width})"

    def __iter__(self) -> Iterator[Line]:
        if self.rule == (0,):
            yield (_EMPTY,) * self.width
            return

        runs = self.rule
        width = self.width
        # フレームは (次に置ける最小位置, 配置済みブロック, 次のブロック番号)
        stack: List[Tuple[int, Tuple[Segment, ...], int]] = [(0, (), 0)]
        while stack:
            index, segments, pos = stack.pop()
            if pos == len(runs):
                yield build_line_from_segments(segments, width)
                continue

            length = runs[pos]
            # 残りのブロックがすべて収まる最後の開始位置
            last_start = width - self._suffix_min[pos]
            # 逆順に積むことで左寄せの配置から取り出される
            for start in range(last_start, index - 1, -1):
                seg = Segment(index=start, length=length)
                stack.append((start + length + 1, segments + (seg,), pos + 1))

    def get_partially_solved_line(self, known_line: Optional[Sequence[TileState]] = None) -> Line:
        """既知のマスと矛盾しない全配置の共通部分を返す

        全配置で塗りのマスは塗り、全配置で空白のマスは空白、
        それ以外は未確定となる。矛盾しない配置が 1 つもなければ
        ``ContradictionError`` を送出する。

        :param known_line: 既知のライン。省略時は全マス未確定とみなす
        """

        if known_line is None:
            reference: Line = (_UNDETERMINED,) * self.width
        else:
            reference = tuple(TileState(v) for v in known_line)
            if len(reference) != self.width:
                raise DimensionMismatchError(
                    f"line length {len(reference)} does not match width {self.width}"
                )

        acc: Optional[List[TileState]] = None
        for candidate in self:
            if _conflicts(candidate, reference):
                continue
            if acc is None:
                acc = list(candidate)
                continue
            # 全マス未確定になった時点で以降の候補は結果を変えない
            if _fold(acc, candidate):
                break

        if acc is None:
            raise ContradictionError("no valid configurations")
        return tuple(acc)


def solve_line(
    rule: Sequence[int], width: int, known_line: Optional[Sequence[TileState]] = None
) -> Line:
    """``LinePlacements(rule, width).get_partially_solved_line`` の短縮形"""
    return LinePlacements(rule, width).get_partially_solved_line(known_line)


__all__ = [
    "LinePlacements",
    "count_placements",
    "build_line_from_segments",
    "solve_line",
]
