"""
シート選択ユーティリティ

要求されたシート名を、ワークブック内のちょうど1つのシートに解決する
"""

import difflib
import logging
from collections.abc import Sequence

from sheetserializer.error_messages import AmbiguousSheetNameError

logger = logging.getLogger(__name__)


class ExcelSheetSelector:
    """シート名の解決（全て staticmethod）"""

    @staticmethod
    def select(
        sheet_names: Sequence[str],
        requested: str | None,
        record_type: type | None = None,
    ) -> str | None:
        """
        読み込むシートを決定する

        - 要求名が空 → レコード型の名前を要求名とする
        - 完全一致が1件 → そのシート
        - 完全一致が複数 → AmbiguousSheetNameError
        - 一致なし → 先頭のシートにフォールバック（シートが1つもなければNone）

        Args:
            sheet_names: ワークブック内のシート名（文書順）
            requested: 要求されたシート名（省略可）
            record_type: 既定名に使うレコード型

        Returns:
            選択したシート名、またはNone（データなし）

        Raises:
            AmbiguousSheetNameError: 同名のシートが複数ある場合
        """
        name = requested or (record_type.__name__ if record_type is not None else "")

        matching = [sheet for sheet in sheet_names if sheet == name]
        if len(matching) > 1:
            raise AmbiguousSheetNameError(name, len(matching))
        if matching:
            return matching[0]

        if not sheet_names:
            logger.info(f"Workbook has no sheets; nothing to read for '{name}'")
            return None

        fallback = sheet_names[0]
        if not name:
            return fallback

        suggestions = difflib.get_close_matches(name, list(sheet_names), n=3, cutoff=0.6)
        logger.warning(
            f"Sheet '{name}' not found; falling back to first sheet '{fallback}'"
            + (f" (similar: {', '.join(suggestions)})" if suggestions else "")
        )
        return fallback
