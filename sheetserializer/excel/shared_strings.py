"""
共有文字列テーブル

セルから序数IDで参照される重複排除済みテキストの解決を担当する
"""

import logging
from collections.abc import Sequence
from typing import IO, Protocol

from openpyxl.reader.strings import read_string_table

from sheetserializer.error_messages import UnresolvedSharedStringError

logger = logging.getLogger(__name__)


class SharedStringResolver(Protocol):
    """共有文字列IDをテキストに解決する"""

    def resolve(self, string_id: str) -> str: ...


class SharedStringTable:
    """リストで保持する共有文字列テーブル

    テーブル自体が存在しない（None）場合も生成でき、その場合は解決時に失敗する。
    """

    def __init__(self, strings: Sequence[str] | None):
        self._strings = list(strings) if strings is not None else None

    @classmethod
    def from_xml(cls, source: IO[bytes]) -> "SharedStringTable":
        """sharedStrings.xml パートから読み込む（リッチテキストはプレーンテキスト化）"""
        strings = [str(item) for item in read_string_table(source)]
        logger.debug(f"Loaded {len(strings)} shared strings")
        return cls(strings)

    @property
    def is_available(self) -> bool:
        """バックエンドのテーブルが存在するかどうか"""
        return self._strings is not None

    def __len__(self) -> int:
        return len(self._strings) if self._strings is not None else 0

    def resolve(self, string_id: str) -> str:
        """
        共有文字列IDをテキストに解決する

        Args:
            string_id: 0始まりの序数を10進数で表した文字列（例: "2"）

        Returns:
            共有文字列のテキスト

        Raises:
            UnresolvedSharedStringError: テーブルがない、IDが不正、または範囲外の場合
        """
        if self._strings is None:
            raise UnresolvedSharedStringError(
                string_id, "shared string cell found, but no shared string table"
            )

        text = (string_id or "").strip()
        if not (text.isascii() and text.isdigit()):
            raise UnresolvedSharedStringError(string_id, "id is not a non-negative integer")

        ordinal = int(text)
        if ordinal >= len(self._strings):
            raise UnresolvedSharedStringError(
                string_id, f"table only has {len(self._strings)} entries"
            )

        return self._strings[ordinal]
