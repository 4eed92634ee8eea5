"""
スプレッドシート読み込みモジュール（xlsx -> 型付きレコード）
"""

import logging
from collections.abc import Collection
from typing import IO

from sheetserializer.config import config
from sheetserializer.excel import (
    CellRepository,
    ExcelPackage,
    ExcelSheetSelector,
    MaterializedRecords,
    RecordMaterializer,
)

logger = logging.getLogger(__name__)


class SpreadsheetReader:
    """スプレッドシートからレコードを読み込むリーダー

    使用例:
        with SpreadsheetReader() as reader:
            reader.open("items.xlsx")
            items = list(reader.deserialize(Item))
    """

    def __init__(self):
        self._package: ExcelPackage | None = None

    def __enter__(self) -> "SpreadsheetReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self, source: str | IO[bytes]) -> None:
        """
        読み込み元を開く

        Args:
            source: ファイルパスまたはバイナリファイルオブジェクト

        Raises:
            PackageFormatError: xlsxパッケージとして読めない場合
        """
        self.close()
        try:
            self._package = ExcelPackage(source)
        except Exception as e:
            logger.error(f"Failed to open spreadsheet: {str(e)}")
            raise

    def close(self) -> None:
        """読み込み元を閉じる（開いていなければ何もしない）"""
        if self._package is not None:
            self._package.close()
            self._package = None

    @property
    def sheet_names(self) -> list[str]:
        """全シートの名前（文書順）"""
        return self._require_package().sheet_names

    def deserialize(
        self,
        record_type: type,
        sheet_name: str | None = None,
        except_properties: Collection[str] | None = None,
    ) -> MaterializedRecords | None:
        """
        シートを読み込んでレコードのシーケンスを返す

        同じリーダーで何度でも呼び出せる。

        Args:
            record_type: 生成するレコードの型
            sheet_name: シート名。省略時はレコード型の名前。
                見つからない場合はワークブックの先頭シートを使う
            except_properties: 読み込みから除外するプロパティ名
                （設定の SHEETSERIALIZER_EXCEPT_PROPERTIES も常に除外）

        Returns:
            レコードのシーケンス。ワークブックにシートが1つもない場合はNone

        Raises:
            AmbiguousSheetNameError: 同名のシートが複数ある場合
            UnresolvedSharedStringError: 共有文字列を解決できない場合（列挙時）
            MalformedAddressError: 不正なセルアドレスがある場合
        """
        package = self._require_package()

        selected = ExcelSheetSelector.select(package.sheet_names, sheet_name, record_type)
        if selected is None:
            return None

        logger.info(f"Reading sheet '{selected}' as {record_type.__name__}")

        # セルと共有文字列はここで読み込み、以降はメモリ上のデータだけを参照する
        repository = CellRepository(package.cells(selected), package.shared_strings())

        excluded = set(config.except_properties)
        if except_properties:
            excluded.update(except_properties)

        materializer = RecordMaterializer(record_type, excluded)
        return materializer.materialize_all(repository)

    def _require_package(self) -> ExcelPackage:
        if self._package is None:
            raise RuntimeError("SpreadsheetReader is not open. Call open() first.")
        return self._package
