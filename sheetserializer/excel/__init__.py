"""
Excel処理ヘルパーモジュール

セルアドレス変換・疎なセル集合の密テーブル化・共有文字列の解決・レコード生成を担当するクラス群
"""

from sheetserializer.excel.address_codec import ExcelAddressCodec
from sheetserializer.excel.cell_repository import (
    CellKind,
    CellRepository,
    RawCell,
    RepositoryRow,
    ResolvedValue,
)
from sheetserializer.excel.package_reader import ExcelPackage, SheetEntry
from sheetserializer.excel.record_materializer import (
    MaterializedRecords,
    RecordMaterializer,
    RecordShape,
    describe_record,
)
from sheetserializer.excel.shared_strings import SharedStringResolver, SharedStringTable
from sheetserializer.excel.sheet_selector import ExcelSheetSelector

__all__ = [
    "ExcelAddressCodec",
    "CellKind",
    "CellRepository",
    "RawCell",
    "RepositoryRow",
    "ResolvedValue",
    "ExcelPackage",
    "SheetEntry",
    "MaterializedRecords",
    "RecordMaterializer",
    "RecordShape",
    "describe_record",
    "SharedStringResolver",
    "SharedStringTable",
    "ExcelSheetSelector",
]
