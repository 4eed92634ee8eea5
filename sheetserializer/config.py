"""
設定管理モジュール
"""

import logging
import os

from dotenv import load_dotenv

# .envファイルを読み込み
load_dotenv()

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SerializerConfig:
    """sheetserializer設定クラス"""

    def __init__(self):
        # ログ設定
        self.log_level = os.getenv("SHEETSERIALIZER_LOG_LEVEL", "INFO").strip().upper()

        # 書き込み時の日付セル書式
        self.date_number_format = os.getenv(
            "SHEETSERIALIZER_DATE_NUMBER_FORMAT", "yyyy-mm-dd h:mm:ss"
        )

        # 読み込み時に常に除外するプロパティ名
        self.except_properties = self._parse_property_names(
            os.getenv("SHEETSERIALIZER_EXCEPT_PROPERTIES", "")
        )

        # CLIで出力する密テーブルのセル数上限（0で無制限）
        self.max_cells = self._parse_int(os.getenv("SHEETSERIALIZER_MAX_CELLS", "0"))

    @property
    def log_level_value(self) -> int:
        """loggingモジュールのレベル値（不正な値はINFO扱い）"""
        if self.log_level in _LOG_LEVELS:
            return getattr(logging, self.log_level)
        return logging.INFO

    @property
    def has_cell_limit(self) -> bool:
        """セル数上限が設定されているかどうか"""
        return self.max_cells is not None and self.max_cells > 0

    def _parse_property_names(self, names_str: str) -> frozenset[str]:
        """カンマ区切りのプロパティ名をセットに変換"""
        if not names_str:
            return frozenset()
        return frozenset(name.strip() for name in names_str.split(",") if name.strip())

    def _parse_int(self, value: str) -> int | None:
        """整数設定の解析（解析できない場合はNone、validateで報告）"""
        try:
            return int(value)
        except ValueError:
            return None

    def validate(self) -> list[str]:
        """設定の検証を行い、エラーメッセージのリストを返す"""
        errors = []

        if self.log_level not in _LOG_LEVELS:
            errors.append(
                f"SHEETSERIALIZER_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}"
            )

        if not self.date_number_format.strip():
            errors.append("SHEETSERIALIZER_DATE_NUMBER_FORMAT must not be empty")

        if self.max_cells is None:
            errors.append("SHEETSERIALIZER_MAX_CELLS must be an integer")
        elif self.max_cells < 0:
            errors.append("SHEETSERIALIZER_MAX_CELLS must be zero or a positive integer")

        return errors

    @property
    def is_valid(self) -> bool:
        """設定が有効かどうかを返す"""
        return len(self.validate()) == 0


# グローバル設定インスタンス
config = SerializerConfig()
