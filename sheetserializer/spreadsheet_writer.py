"""
スプレッドシート書き込みモジュール（型付きレコード -> xlsx、openpyxl方式）

1行目にフィールド名、2行目以降に1レコード1行で書き込む。
読み込み側（SpreadsheetReader）が解釈できる値の表現:
- bool: ブール値セル（0/1）
- datetime / date: OA日付（シリアル値）の数値セル + 日付書式
- Enum: メンバー名の文字列
- None: セルを書かない
"""

import datetime
import logging
from collections.abc import Iterable
from enum import Enum
from typing import IO, Any

from openpyxl import Workbook
from openpyxl.cell import Cell

from sheetserializer.config import config
from sheetserializer.error_messages import handle_spreadsheet_error
from sheetserializer.excel.oa_date import to_oa_date
from sheetserializer.excel.record_materializer import describe_record

logger = logging.getLogger(__name__)


class SpreadsheetWriter:
    """レコードをスプレッドシートに書き込むライター

    使用例:
        with SpreadsheetWriter() as writer:
            writer.open(stream)
            writer.serialize(items, "Items")
    """

    def __init__(self):
        self._workbook: Workbook | None = None
        self._target: str | IO[bytes] | None = None
        self._placeholder = None

    def __enter__(self) -> "SpreadsheetWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self, target: str | IO[bytes]) -> None:
        """
        書き込み先を指定して新しいワークブックを作成する

        Args:
            target: ファイルパスまたはバイナリファイルオブジェクト
        """
        self._workbook = Workbook()
        self._target = target
        # 何も書き込まれなかった場合のために既定シートは最初のserializeまで残す
        self._placeholder = self._workbook.active

    def close(self) -> None:
        """ワークブックを保存して閉じる（開いていなければ何もしない）"""
        if self._workbook is None:
            return

        workbook, target = self._workbook, self._target
        self._workbook = None
        self._target = None
        self._placeholder = None

        try:
            workbook.save(target)
        except Exception as e:
            logger.error(f"Failed to save spreadsheet: {str(e)}")
            raise handle_spreadsheet_error(e, "write") from e

        logger.info(f"Saved workbook with {len(workbook.sheetnames)} sheets")

    def serialize(
        self,
        items: Iterable[Any],
        sheet_name: str | None = None,
        record_type: type | None = None,
    ) -> None:
        """
        レコードを新しいシートに書き込む

        Args:
            items: 書き込むレコード
            sheet_name: シート名（省略時はレコード型の名前）
            record_type: レコード型（省略時は先頭レコードの型。空のコレクションでも
                ヘッダー行を書くには指定する）
        """
        if self._workbook is None:
            raise RuntimeError("SpreadsheetWriter is not open. Call open() first.")

        items = list(items)
        if record_type is None and items:
            record_type = type(items[0])

        if sheet_name:
            title = sheet_name
        elif record_type is not None:
            title = record_type.__name__
        else:
            title = "Sheet"

        if self._placeholder is not None:
            self._workbook.remove(self._placeholder)
            self._placeholder = None

        worksheet = self._workbook.create_sheet(title=title)

        if record_type is None:
            logger.warning(f"No records and no record type for sheet '{title}'; wrote an empty sheet")
            return

        names = describe_record(record_type).field_names
        worksheet.append(names)

        for row_index, item in enumerate(items, start=2):
            for column_index, name in enumerate(names, start=1):
                value = getattr(item, name, None)
                if value is None:
                    continue
                self._write_value(worksheet.cell(row=row_index, column=column_index), value)

        logger.info(f"Wrote {len(items)} {record_type.__name__} records to sheet '{title}'")

    def _write_value(self, cell: Cell, value: Any) -> None:
        """値を読み込み側が解釈できる表現でセルに書く"""
        if isinstance(value, Enum):
            cell.value = value.name
            cell.data_type = "s"
        elif isinstance(value, (datetime.datetime, datetime.date)):
            cell.value = to_oa_date(value)
            cell.number_format = config.date_number_format
        elif isinstance(value, str):
            cell.value = value
            # "=" で始まる文字列を数式として扱わない
            cell.data_type = "s"
        else:
            cell.value = value
