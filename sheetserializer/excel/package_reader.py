"""
xlsxパッケージ読み込みモジュール

ワークブックのシート一覧、シートごとのセル、共有文字列テーブルをコアに渡す。
シート一覧とリレーションシップはopenpyxlで読み、セルだけは型変換前の生の値を
取り出すためにワークシートのXMLを直接たどる。書式・数式は扱わない。
"""

import logging
import zipfile
from dataclasses import dataclass
from typing import IO
from xml.etree import ElementTree

from openpyxl.packaging.relationship import RelationshipList, get_dependents, get_rels_path
from openpyxl.reader.workbook import WorkbookParser
from openpyxl.xml.constants import ARC_ROOT_RELS, ARC_WORKBOOK, SHEET_MAIN_NS

from sheetserializer.error_messages import PackageFormatError, handle_spreadsheet_error
from sheetserializer.excel.cell_repository import CellKind, RawCell
from sheetserializer.excel.shared_strings import SharedStringTable

logger = logging.getLogger(__name__)

# リレーションシップの種類はURLの末尾で判定する（Strict形式は名前空間が異なる）
_OFFICE_DOCUMENT_TYPE = "/officeDocument"
_SHARED_STRINGS_TYPE = "/sharedStrings"

_CELL_TAG = f"{{{SHEET_MAIN_NS}}}c"
_VALUE_TAG = f"{{{SHEET_MAIN_NS}}}v"
_INLINE_STRING_TAG = f"{{{SHEET_MAIN_NS}}}is"
_TEXT_TAG = f"{{{SHEET_MAIN_NS}}}t"


@dataclass(frozen=True)
class SheetEntry:
    """ワークブック内の1シート"""

    name: str
    part: str


class ExcelPackage:
    """xlsxパッケージ（ZIP）からシートとセルを取り出す"""

    def __init__(self, source: str | IO[bytes]):
        """
        Args:
            source: ファイルパスまたはバイナリファイルオブジェクト

        Raises:
            PackageFormatError: xlsxパッケージとして読めない場合
        """
        self._source_name = source if isinstance(source, str) else ""
        try:
            self._archive = zipfile.ZipFile(source)
        except Exception as e:
            raise handle_spreadsheet_error(e, "open", self._source_name) from e

        try:
            self._workbook_part = self._find_workbook_part()
            self._workbook_rels = self._read_relationships(self._workbook_part)
            self.sheets = self._read_sheet_entries()
        except Exception as e:
            self._archive.close()
            raise handle_spreadsheet_error(e, "open", self._source_name) from e

        logger.info(f"Opened workbook with {len(self.sheets)} sheets")

    def __enter__(self) -> "ExcelPackage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """ZIPアーカイブを閉じる"""
        self._archive.close()

    @property
    def sheet_names(self) -> list[str]:
        """シート名の一覧（文書順）"""
        return [sheet.name for sheet in self.sheets]

    def shared_strings(self) -> SharedStringTable:
        """共有文字列テーブル（パートがない場合は空のテーブル）"""
        part = self._find_related_part(self._workbook_rels, _SHARED_STRINGS_TYPE)
        if part is None:
            return SharedStringTable(None)

        try:
            with self._archive.open(part) as stream:
                return SharedStringTable.from_xml(stream)
        except Exception as e:
            raise handle_spreadsheet_error(e, "read", self._source_name) from e

    def cells(self, sheet_name: str) -> list[RawCell]:
        """
        指定シートの全セルを読み込む

        Args:
            sheet_name: シート名（同名が複数ある場合は最初のシート）

        Returns:
            RawCellのリスト（文書順）
        """
        entry = next((sheet for sheet in self.sheets if sheet.name == sheet_name), None)
        if entry is None:
            raise KeyError(f"Sheet not found: {sheet_name}")

        try:
            root = self._read_xml(entry.part)
        except Exception as e:
            raise handle_spreadsheet_error(e, "read", self._source_name) from e

        cells = [self._to_raw_cell(element) for element in root.iter(_CELL_TAG)]
        logger.debug(f"Read {len(cells)} cells from sheet '{sheet_name}'")
        return cells

    def _to_raw_cell(self, element: ElementTree.Element) -> RawCell:
        """<c> 要素を RawCell に変換"""
        address = element.get("r")
        if address is None:
            raise PackageFormatError("A cell without a reference was found in the worksheet.")

        cell_type = element.get("t", "n")

        if cell_type == "inlineStr":
            inline = element.find(_INLINE_STRING_TAG)
            if inline is None:
                return RawCell(address, CellKind.EMPTY)
            text = "".join(node.text or "" for node in inline.iter(_TEXT_TAG))
            return RawCell(address, CellKind.TEXT, text)

        value = element.find(_VALUE_TAG)
        if value is None:
            return RawCell(address, CellKind.EMPTY)

        if cell_type == "s":
            return RawCell(address, CellKind.SHARED_STRING, value.text)

        return RawCell(address, CellKind.TEXT, value.text)

    def _find_workbook_part(self) -> str:
        """ルートのリレーションシップからワークブックのパートを探す"""
        root_rels = self._read_relationships("")
        return self._find_related_part(root_rels, _OFFICE_DOCUMENT_TYPE) or ARC_WORKBOOK

    def _read_sheet_entries(self) -> list[SheetEntry]:
        """workbook.xml の <sheets> からシート一覧を作る（文書順）"""
        parser = WorkbookParser(self._archive, self._workbook_part, keep_links=False)
        parser.parse()
        return [
            SheetEntry(name=sheet.name, part=relationship.target)
            for sheet, relationship in parser.find_sheets()
        ]

    def _read_relationships(self, part: str) -> RelationshipList:
        """パートのリレーションシップ（ターゲットは解決済みのパート名、.relsがない場合は空）"""
        rels_path = ARC_ROOT_RELS if not part else get_rels_path(part)
        if rels_path not in self._archive.namelist():
            return RelationshipList()
        return get_dependents(self._archive, rels_path)

    def _find_related_part(
        self, relationships: RelationshipList, type_suffix: str
    ) -> str | None:
        """種類（Typeの末尾）でリレーションシップ先のパートを探す"""
        for relationship in relationships:
            if relationship.TargetMode == "External":
                continue
            if relationship.Type.endswith(type_suffix):
                return relationship.target
        return None

    def _read_xml(self, part: str) -> ElementTree.Element:
        """パートをXMLとして読み込む"""
        with self._archive.open(part) as stream:
            return ElementTree.parse(stream).getroot()
