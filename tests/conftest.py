import os
import zipfile
from io import BytesIO
from unittest.mock import patch

import pytest
from openpyxl import Workbook

from sheetserializer.excel import CellKind, RawCell, SharedStringTable


@pytest.fixture
def mock_env_vars():
    """Mock environment variables for testing"""
    env_vars = {
        "SHEETSERIALIZER_LOG_LEVEL": "DEBUG",
        "SHEETSERIALIZER_DATE_NUMBER_FORMAT": "yyyy-mm-dd",
        "SHEETSERIALIZER_EXCEPT_PROPERTIES": "Id, Notes",
        "SHEETSERIALIZER_MAX_CELLS": "1000",
    }

    with patch.dict(os.environ, env_vars, clear=True):
        yield env_vars


@pytest.fixture
def string_table():
    """テスト用の共有文字列テーブル（3件）"""
    return SharedStringTable(["Name", "Alice", "Bob"])


@pytest.fixture
def text_cell():
    """アドレスとテキストからRawCellを作るヘルパー"""

    def _make(address: str, payload: str | None, kind: CellKind = CellKind.TEXT) -> RawCell:
        return RawCell(address, kind, payload)

    return _make


@pytest.fixture
def xlsx_bytes():
    """シート名 -> 行データ の辞書からxlsxのバイト列を作るヘルパー"""

    def _make(sheets: dict[str, list[list]]) -> BytesIO:
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(row)

        # BytesIOに保存
        excel_bytes = BytesIO()
        wb.save(excel_bytes)
        excel_bytes.seek(0)
        return excel_bytes

    return _make


# 最小限のxlsxパッケージ（openpyxlでは作れない形式: 共有文字列セル・シートなし・同名シート）

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types"/>
"""

ROOT_RELS = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="xl/workbook.xml"/>
</Relationships>
"""

SHARED_STRINGS = """<?xml version="1.0" encoding="UTF-8"?>
<sst xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main">
  <si><t>Key</t></si>
  <si><t>Hello, world!</t></si>
</sst>
"""


def _workbook_xml(sheet_names: list[str]) -> str:
    sheets = "".join(
        f'<sheet name="{name}" sheetId="{index}" r:id="rId{index}"/>'
        for index, name in enumerate(sheet_names, start=1)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<workbook xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main" '
        'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
        f"<sheets>{sheets}</sheets></workbook>"
    )


def _workbook_rels(sheet_count: int, with_shared_strings: bool) -> str:
    rels = "".join(
        f'<Relationship Id="rId{index}" '
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet" '
        f'Target="worksheets/sheet{index}.xml"/>'
        for index in range(1, sheet_count + 1)
    )
    if with_shared_strings:
        rels += (
            '<Relationship Id="rIdStrings" '
            'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/sharedStrings" '
            'Target="sharedStrings.xml"/>'
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        f"{rels}</Relationships>"
    )


def _sheet_xml(cells: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<worksheet xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main">'
        f"<sheetData>{cells}</sheetData></worksheet>"
    )


def _build_package(
    sheets: list[tuple[str, str]], shared_strings: str | None = SHARED_STRINGS
) -> BytesIO:
    """(シート名, <sheetData>の中身) の並びから最小限のxlsxパッケージを作る"""
    stream = BytesIO()
    with zipfile.ZipFile(stream, "w") as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES)
        archive.writestr("_rels/.rels", ROOT_RELS)
        archive.writestr("xl/workbook.xml", _workbook_xml([name for name, _ in sheets]))
        archive.writestr(
            "xl/_rels/workbook.xml.rels",
            _workbook_rels(len(sheets), shared_strings is not None),
        )
        for index, (_, cells) in enumerate(sheets, start=1):
            archive.writestr(f"xl/worksheets/sheet{index}.xml", _sheet_xml(cells))
        if shared_strings is not None:
            archive.writestr("xl/sharedStrings.xml", shared_strings)
    stream.seek(0)
    return stream


@pytest.fixture
def minimal_xlsx():
    """(シート名, <sheetData>の中身) のリストから最小限のxlsxを作るヘルパー（同名シートも可）"""

    def _make(sheets, shared_strings: str | None = SHARED_STRINGS) -> BytesIO:
        if isinstance(sheets, dict):
            sheets = list(sheets.items())
        return _build_package(sheets, shared_strings)

    return _make
