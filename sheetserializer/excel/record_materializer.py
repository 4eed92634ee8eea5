"""
レコード生成モジュール

ヘッダー行（1行目）の列名をフィールド名として、以降の各行のテキスト値を
型付きレコードのフィールドに変換・代入する。

型変換に失敗した値はエラーにせず読み飛ばす（フィールドは既定値のまま）。
"""

import dataclasses
import datetime
import decimal
import functools
import inspect
import logging
import re
import types
import typing
from collections.abc import Callable, Collection, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sheetserializer.excel.cell_repository import CellRepository, RepositoryRow
from sheetserializer.excel.oa_date import from_oa_date

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")


# 型変換関数: 失敗時は ValueError / ArithmeticError を送出する


def _coerce_int(text: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def _coerce_decimal(text: str) -> decimal.Decimal:
    value = decimal.Decimal(text.strip())
    if not value.is_finite():
        raise ValueError(f"not a finite decimal: {text!r}")
    return value


def _coerce_float(text: str) -> float:
    return float(_coerce_decimal(text))


def _coerce_bool(text: str) -> bool:
    # ファイル上の正規表現は 0/1。true/false で入ってくる場合もある
    if _INTEGER_PATTERN.fullmatch(text):
        return int(text) != 0

    literal = text.strip().lower()
    if literal == "true":
        return True
    if literal == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _coerce_datetime(text: str) -> datetime.datetime:
    # この時点で日付はOA日付（シリアル値）になっている前提
    return from_oa_date(float(text))


def _coerce_date(text: str) -> datetime.date:
    return _coerce_datetime(text).date()


def _coerce_str(text: str) -> str:
    value = text.strip()
    if not value:
        raise ValueError("blank text")
    return value


def _coerce_enum(enum_type: type[Enum], text: str) -> Enum:
    name = text.strip()
    try:
        return enum_type[name]
    except KeyError:
        pass

    # 名前で見つからない場合は値で探す（IntEnum の "2" など）
    for member in enum_type:
        if str(member.value) == name:
            return member
    raise ValueError(f"{name!r} is not a member of {enum_type.__name__}")


_COERCERS: dict[Any, Callable[[str], Any]] = {
    datetime.datetime: _coerce_datetime,
    datetime.date: _coerce_date,
    int: _coerce_int,
    decimal.Decimal: _coerce_decimal,
    float: _coerce_float,
    bool: _coerce_bool,
    str: _coerce_str,
}


def unwrap_optional(declared_type: Any) -> Any:
    """Optional[X] / X | None から X を取り出す（それ以外はそのまま）"""
    origin = typing.get_origin(declared_type)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(declared_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return declared_type


def coercer_for(declared_type: Any) -> Callable[[str], Any] | None:
    """宣言型に対応する変換関数（変換規則がない型はNone）"""
    target = unwrap_optional(declared_type)

    if isinstance(target, type) and issubclass(target, Enum):
        return functools.partial(_coerce_enum, target)

    return _COERCERS.get(target)


# 値がない必須フィールドに入れる値
_ZERO_VALUES: dict[Any, Any] = {
    datetime.datetime: datetime.datetime.min,
    datetime.date: datetime.date.min,
    int: 0,
    decimal.Decimal: decimal.Decimal(0),
    float: 0.0,
    bool: False,
    str: "",
}


def zero_value(declared_type: Any) -> Any:
    """宣言型のゼロ値（Optional と変換規則がない型はNone、Enumは先頭のメンバー）"""
    target = unwrap_optional(declared_type)
    if target is not declared_type:
        return None

    if isinstance(target, type) and issubclass(target, Enum):
        return next(iter(target), None)

    return _ZERO_VALUES.get(target)


@dataclass(frozen=True)
class FieldBinding:
    """レコードの1フィールド"""

    name: str
    declared_type: Any
    coerce: Callable[[str], Any] | None
    settable: bool


class RecordShape:
    """レコード型のフィールド構成（フィールド名 -> 変換関数・代入可否）

    型ごとに1度だけ作成する（describe_record を使用）。
    """

    def __init__(self, record_type: type):
        self.record_type = record_type
        self.is_dataclass = dataclasses.is_dataclass(record_type)
        self.fields: dict[str, FieldBinding] = {}
        # 既定値のないdataclassフィールド -> ゼロ値
        self.required_defaults: dict[str, Any] = {}

        hints = _type_hints(record_type)

        if self.is_dataclass:
            for field in dataclasses.fields(record_type):
                declared = hints.get(field.name, field.type)
                self._add(field.name, declared, settable=field.init)
                if field.init and _has_no_default(field):
                    self.required_defaults[field.name] = zero_value(declared)
        else:
            for name, declared in hints.items():
                if name.startswith("_") or typing.get_origin(declared) is typing.ClassVar:
                    continue
                attribute = inspect.getattr_static(record_type, name, None)
                settable = not isinstance(attribute, property) or attribute.fset is not None
                self._add(name, declared, settable=settable)

            for name, attribute in inspect.getmembers(
                record_type, lambda member: isinstance(member, property)
            ):
                if name.startswith("_") or name in self.fields:
                    continue
                declared = _type_hints(attribute.fget).get("return")
                self._add(name, declared, settable=attribute.fset is not None)

    def _add(self, name: str, declared_type: Any, settable: bool) -> None:
        self.fields[name] = FieldBinding(
            name=name,
            declared_type=declared_type,
            coerce=coercer_for(declared_type),
            settable=settable,
        )

    @property
    def field_names(self) -> list[str]:
        """代入可能なフィールド名（宣言順）"""
        return [name for name, binding in self.fields.items() if binding.settable]

    def build(self, values: dict[str, Any]) -> Any:
        """
        変換済みの値からレコードを生成する

        値がないフィールドは既定値のまま。既定値のない必須フィールドはゼロ値になる。
        """
        if self.is_dataclass:
            return self.record_type(**{**self.required_defaults, **values})

        record = self.record_type()
        for name, value in values.items():
            setattr(record, name, value)
        return record

    def __repr__(self) -> str:
        return f"RecordShape({self.record_type.__name__}, fields={list(self.fields)})"


def _has_no_default(field: dataclasses.Field) -> bool:
    return field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING


def _type_hints(target: Any) -> dict[str, Any]:
    """型ヒントを取得（前方参照が解決できない場合は生のアノテーション）"""
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError) as e:
        logger.warning(f"Failed to resolve type hints for {target!r}: {e}")
        return dict(getattr(target, "__annotations__", {}))


@functools.lru_cache(maxsize=None)
def describe_record(record_type: type) -> RecordShape:
    """レコード型の RecordShape を取得（型ごとにキャッシュ）"""
    return RecordShape(record_type)


class RecordMaterializer:
    """ヘッダー行とデータ行からレコードを生成する"""

    def __init__(self, record_type: type, except_properties: Collection[str] | None = None):
        self.shape = describe_record(record_type)
        self.except_properties = frozenset(except_properties or ())

    def header_row(self, row: RepositoryRow) -> dict[int, str]:
        """
        ヘッダー行から 列番号 -> ヘッダー名 の対応を作る

        ヘッダーのテキストがない（空白のみを含む）列は含めない。
        """
        return {
            item.column: item.value
            for item in row.columns()
            if item is not None and (item.value or "").strip()
        }

    def row_values(self, headers: dict[int, str], row: RepositoryRow) -> dict[str, str]:
        """
        データ行から ヘッダー名 -> テキスト の対応を作る

        除外条件:
        - 列にヘッダーがない
        - セルの値がない
        - ヘッダー名が except_properties に含まれる
        """
        values = {}
        for item in row.columns():
            if item is None or item.value is None:
                continue
            name = headers.get(item.column)
            if name is None or name in self.except_properties:
                continue
            values[name] = item.value
        return values

    def materialize(self, headers: dict[int, str], row: RepositoryRow) -> Any:
        """データ行1行からレコードを1件生成する"""
        converted = {}
        for name, text in self.row_values(headers, row).items():
            binding = self.shape.fields.get(name)

            # 存在しないフィールド、代入できないフィールドは無視
            if binding is None or not binding.settable or binding.coerce is None:
                continue

            try:
                converted[name] = binding.coerce(text)
            except (ValueError, ArithmeticError) as e:
                logger.debug(
                    f"Skipped {self.shape.record_type.__name__}.{name} "
                    f"at row {row.row}: {e}"
                )

        return self.shape.build(converted)

    def materialize_all(self, repository: CellRepository) -> "MaterializedRecords":
        """リポジトリの2行目以降を全てレコード化する（遅延評価）"""
        return MaterializedRecords(self, repository)


class MaterializedRecords:
    """データ行ごとに1件のレコードを返す再列挙可能なシーケンス"""

    def __init__(self, materializer: RecordMaterializer, repository: CellRepository):
        self._materializer = materializer
        self._repository = repository

    def __iter__(self) -> Iterator[Any]:
        rows = self._repository.rows()

        # 1行目はヘッダー
        first = next(rows, None)
        if first is None:
            return

        headers = self._materializer.header_row(first)
        for row in rows:
            yield self._materializer.materialize(headers, row)

    def __len__(self) -> int:
        return max(self._repository.row_count - 1, 0)

    def __repr__(self) -> str:
        return (
            f"MaterializedRecords({self._materializer.shape.record_type.__name__}, "
            f"count={len(self)})"
        )
