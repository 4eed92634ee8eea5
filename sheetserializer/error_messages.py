"""
Error message definitions for sheetserializer
Provides readable error messages with a suggested solution for each failure category
"""

import zipfile
from enum import Enum


class ErrorCategory(Enum):
    """Error category definitions"""

    ADDRESS = "address"
    EXTENT = "extent"
    SHARED_STRING = "shared_string"
    SHEET_SELECTION = "sheet_selection"
    PACKAGE = "package"
    UNKNOWN = "unknown"


class SpreadsheetError(Exception):
    """Custom exception class for spreadsheet operations"""

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        solution: str,
        original_error: Exception | None = None,
    ):
        self.category = category
        self.message = message
        self.solution = solution
        self.original_error = original_error
        super().__init__(self.get_formatted_message())

    def get_formatted_message(self) -> str:
        """Get formatted error message"""
        return f"{self.message} {self.solution}"


class MalformedAddressError(SpreadsheetError):
    """セルアドレスが「英字+数字」の形式に一致しない"""

    def __init__(self, address: str, original_error: Exception | None = None):
        self.address = address
        super().__init__(
            category=ErrorCategory.ADDRESS,
            message=f"Malformed cell address: '{address}'.",
            solution="Cell addresses must be column letters followed by a 1-based row number (e.g. 'A1', 'AB12').",
            original_error=original_error,
        )


class EmptyTableExtentError(SpreadsheetError):
    """セルが1つもないテーブルの範囲（最大行・最大列）を要求した"""

    def __init__(self):
        super().__init__(
            category=ErrorCategory.EXTENT,
            message="The table has no cells, so it has no extent.",
            solution="Check row_count or is_empty before asking for max_row or max_col.",
        )


class UnresolvedSharedStringError(SpreadsheetError):
    """共有文字列IDを解決できない（テーブルなし・範囲外・不正なID）"""

    def __init__(self, string_id: str | None, reason: str):
        self.string_id = string_id
        super().__init__(
            category=ErrorCategory.SHARED_STRING,
            message=f"Unable to find shared string reference for id {string_id!r}: {reason}.",
            solution="The document is corrupt or uses an unsupported shared string layout.",
        )


class AmbiguousSheetNameError(SpreadsheetError):
    """要求されたシート名に一致するシートが複数ある"""

    def __init__(self, sheet_name: str, match_count: int):
        self.sheet_name = sheet_name
        self.match_count = match_count
        super().__init__(
            category=ErrorCategory.SHEET_SELECTION,
            message=f"Ambiguous sheet name. Spreadsheet has {match_count} sheets matching '{sheet_name}'.",
            solution="Please rename the duplicate sheets or request a sheet name that is unique in the workbook.",
        )


class PackageFormatError(SpreadsheetError):
    """xlsxパッケージとして読み込めない"""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(
            category=ErrorCategory.PACKAGE,
            message=message,
            solution="Please verify that the file is a valid .xlsx workbook and is not password protected.",
            original_error=original_error,
        )


def get_package_error(original_error: Exception, source: str = "") -> SpreadsheetError:
    """Generate package error message"""
    location = f" ({source})" if source else ""

    if isinstance(original_error, zipfile.BadZipFile):
        message = f"The file is not a zip package{location}."
    elif isinstance(original_error, KeyError):
        message = f"A required part is missing from the package{location}: {original_error}."
    elif isinstance(original_error, SyntaxError):
        # ElementTree・lxml の構文エラーはどちらも SyntaxError の派生
        message = f"A package part contains invalid XML{location}."
    elif isinstance(original_error, FileNotFoundError):
        message = f"The workbook file was not found{location}."
    else:
        message = f"The workbook could not be read{location}."

    return PackageFormatError(message, original_error)


def get_unknown_error(original_error: Exception) -> SpreadsheetError:
    """Generate unknown error message"""
    return SpreadsheetError(
        category=ErrorCategory.UNKNOWN,
        message="An unexpected error occurred.",
        solution="Please check the input workbook and the record type being read.",
        original_error=original_error,
    )


def handle_spreadsheet_error(
    error: Exception, context: str = "", source: str = ""
) -> SpreadsheetError:
    """
    Classify spreadsheet-related errors into appropriate categories

    Args:
        error: The exception that occurred
        context: The context where the error occurred ("open", "read", "write", etc.)
        source: Path or description of the workbook being processed

    Returns:
        SpreadsheetError: Classified error with a readable message
    """
    # 既に分類済みのエラーはそのまま返す
    if isinstance(error, SpreadsheetError):
        return error

    if isinstance(error, (zipfile.BadZipFile, SyntaxError)):
        return get_package_error(error, source)
    if isinstance(error, OSError) and context in ("open", "read"):
        return get_package_error(error, source)
    if isinstance(error, KeyError) and context in ("open", "read"):
        return get_package_error(error, source)

    return get_unknown_error(error)
