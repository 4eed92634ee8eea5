"""
Excelセルアドレス変換ユーティリティ

列文字（"A", "AF"など）と0始まりの列番号、アドレス文字列と(列, 行)の相互変換を担当するヘルパークラス
"""

import re

from sheetserializer.error_messages import MalformedAddressError

# 英字の連続 + 数字の連続（完全一致）
_ADDRESS_PATTERN = re.compile(r"([A-Za-z]+)([0-9]+)")


class ExcelAddressCodec:
    """列文字・セルアドレスの変換（全て staticmethod）

    列番号は0始まり（"A" = 0）、行番号は1始まり。
    """

    @staticmethod
    def column_index_of(letters: str) -> int:
        """
        列文字を0始まりの列番号に変換する（全単射26進数）

        Args:
            letters: 列文字（例: "AF"）。小文字も受け付ける

        Returns:
            列番号（例: "A" -> 0, "Z" -> 25, "AA" -> 26, "AAA" -> 702）
            空文字は0

        Raises:
            MalformedAddressError: 英字以外が含まれる場合
        """
        # last + 26 * (1 + 残り) の再帰定義をループで計算する
        # 空文字 = 0、1文字目以降は「1始まりの桁」として積み上げて最後に1を引く
        if not letters:
            return 0

        index = 0
        for char in letters.upper():
            if not ("A" <= char <= "Z"):
                raise MalformedAddressError(letters)
            index = index * 26 + (ord(char) - ord("A") + 1)
        return index - 1

    @staticmethod
    def letters_of(index: int) -> str:
        """
        0始まりの列番号を列文字に変換する

        Args:
            index: 列番号（例: 0 -> "A", 26 -> "AA"）

        Returns:
            列文字

        Raises:
            ValueError: 負の列番号の場合
        """
        if index < 0:
            raise ValueError(f"Column index must not be negative: {index}")

        letters = []
        remaining = index
        while remaining >= 26:
            letters.append(chr(ord("A") + remaining % 26))
            remaining = remaining // 26 - 1
        letters.append(chr(ord("A") + remaining))
        return "".join(reversed(letters))

    @staticmethod
    def parse_address(address: str) -> tuple[str, int]:
        """
        セルアドレスを列文字と行番号に分解する

        Args:
            address: セルアドレス（例: "B12"）

        Returns:
            (列文字, 行番号)のタプル（例: ("B", 12)）

        Raises:
            MalformedAddressError: "英字+数字"に完全一致しない場合、または行番号が0の場合
        """
        if not isinstance(address, str):
            raise MalformedAddressError(repr(address))

        match = _ADDRESS_PATTERN.fullmatch(address)
        if match is None:
            raise MalformedAddressError(address)

        row = int(match.group(2))
        if row < 1:
            raise MalformedAddressError(address)

        return (match.group(1), row)

    @staticmethod
    def split_address(address: str) -> tuple[int, int]:
        """
        セルアドレスを(列番号, 行番号)に変換する

        Args:
            address: セルアドレス（例: "C5"）

        Returns:
            (列番号, 行番号)のタプル（例: (2, 5)）
        """
        letters, row = ExcelAddressCodec.parse_address(address)
        return (ExcelAddressCodec.column_index_of(letters), row)

    @staticmethod
    def format_address(column: int, row: int) -> str:
        """
        (列番号, 行番号)からセルアドレスを生成する

        Args:
            column: 0始まりの列番号
            row: 1始まりの行番号

        Returns:
            セルアドレス（例: (2, 5) -> "C5"）
        """
        return f"{ExcelAddressCodec.letters_of(column)}{row}"
