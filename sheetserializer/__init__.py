"""
sheetserializer: スプレッドシート（xlsx）と型付きレコードの相互変換
"""

from sheetserializer.error_messages import (
    AmbiguousSheetNameError,
    EmptyTableExtentError,
    MalformedAddressError,
    PackageFormatError,
    SpreadsheetError,
    UnresolvedSharedStringError,
)
from sheetserializer.spreadsheet_reader import SpreadsheetReader
from sheetserializer.spreadsheet_writer import SpreadsheetWriter

__all__ = [
    "SpreadsheetReader",
    "SpreadsheetWriter",
    "SpreadsheetError",
    "MalformedAddressError",
    "EmptyTableExtentError",
    "UnresolvedSharedStringError",
    "AmbiguousSheetNameError",
    "PackageFormatError",
]
