"""
セルリポジトリ

アドレス付きの疎なセル集合を、欠損を空値で埋めた完全な矩形テーブルとして扱うためのクラス群

行は1始まり、列は0始まり（列文字との相互変換を簡単にするため）。
ある行が25列あれば、後ろが全て空でも全ての行が25列として扱われる。
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from sheetserializer.error_messages import EmptyTableExtentError
from sheetserializer.excel.address_codec import ExcelAddressCodec
from sheetserializer.excel.shared_strings import SharedStringResolver

logger = logging.getLogger(__name__)


class CellKind(Enum):
    """セルの値の種類"""

    TEXT = "text"
    SHARED_STRING = "shared_string"
    EMPTY = "empty"


@dataclass(frozen=True)
class RawCell:
    """パッケージから読み込んだままのセル"""

    address: str
    kind: CellKind = CellKind.TEXT
    payload: str | None = None


@dataclass(frozen=True)
class ResolvedValue:
    """解決済みのセル値（valueがNoneなら内容なし。空文字とは区別する）"""

    column: int
    value: str | None


class CellRepository:
    """疎なセル集合を密な行・列として参照するリポジトリ（構築後は不変）"""

    def __init__(self, cells: Iterable[RawCell], string_map: SharedStringResolver):
        """
        Args:
            cells: 対象のセル（同じアドレスは後勝ち）
            string_map: 共有文字列の解決先

        Raises:
            MalformedAddressError: アドレスが不正なセルが含まれる場合
        """
        self._string_map = string_map
        self._cells: dict[tuple[int, int], RawCell] = {}

        for cell in cells:
            self._cells[ExcelAddressCodec.split_address(cell.address)] = cell

        # 範囲（最大行・最大列）は構築時に1度だけ計算する
        if self._cells:
            self._max_row = max(row for _, row in self._cells)
            self._max_col = max(col for col, _ in self._cells)
        else:
            self._max_row = None
            self._max_col = None

        logger.debug(
            f"Built cell repository with {len(self._cells)} cells "
            f"(rows={self.row_count}, cols={self.column_count})"
        )

    @property
    def is_empty(self) -> bool:
        """セルが1つもないかどうか"""
        return not self._cells

    @property
    def row_count(self) -> int:
        """行数（空テーブルは0）"""
        return self._max_row or 0

    @property
    def column_count(self) -> int:
        """列数（空テーブルは0）"""
        return 0 if self._max_col is None else self._max_col + 1

    @property
    def max_row(self) -> int:
        """最大行番号（1始まり）"""
        if self._max_row is None:
            raise EmptyTableExtentError()
        return self._max_row

    @property
    def max_col(self) -> int:
        """最大列番号（0始まり）"""
        if self._max_col is None:
            raise EmptyTableExtentError()
        return self._max_col

    def value_at(self, column: int, row: int) -> ResolvedValue | None:
        """
        1つのセル値を取得する

        Args:
            column: 列番号（0始まり）
            row: 行番号（1始まり）

        Returns:
            解決済みの値。セルが存在しない・内容がない場合はNone

        Raises:
            UnresolvedSharedStringError: 共有文字列を解決できない場合
        """
        cell = self._cells.get((column, row))
        if cell is None:
            return None

        # 共有文字列はペイロードが空に見えてもIDとして解決する（"0"も有効なID）
        if cell.kind is CellKind.SHARED_STRING:
            return ResolvedValue(column, self._string_map.resolve(cell.payload))

        if cell.kind is CellKind.TEXT and cell.payload:
            return ResolvedValue(column, cell.payload)

        return None

    def rows(self) -> Iterator["RepositoryRow"]:
        """全ての行（1始まりの昇順）。呼び出すたびに新しく列挙する"""
        for row in range(1, self.row_count + 1):
            yield RepositoryRow(self, row)


class RepositoryRow:
    """CellRepository の1行"""

    def __init__(self, repository: CellRepository, row: int):
        self._repository = repository
        self.row = row

    def columns(self) -> Iterator[ResolvedValue | None]:
        """矩形内の全ての列の値（0始まりの昇順、欠損はNone）"""
        for column in range(self._repository.column_count):
            yield self._repository.value_at(column, self.row)

    def value(self, column: int) -> ResolvedValue | None:
        """指定列の値"""
        return self._repository.value_at(column, self.row)

    def values(self) -> list[str | None]:
        """全ての列のテキスト（欠損はNone）"""
        return [item.value if item else None for item in self.columns()]

    def __repr__(self) -> str:
        return f"RepositoryRow(row={self.row})"
