"""
ExcelAddressCodecのテスト
"""

import pytest
from openpyxl.utils import column_index_from_string, get_column_letter

from sheetserializer.error_messages import MalformedAddressError
from sheetserializer.excel import ExcelAddressCodec


def _column_index_recursive(letters: str) -> int:
    """列番号の再帰定義（last + 26 * (1 + 残り)、空文字は0）"""
    if not letters:
        return 0
    last = ord(letters[-1]) - ord("A")
    if len(letters) == 1:
        return last
    return last + 26 * (1 + _column_index_recursive(letters[:-1]))


class TestExcelAddressCodec:
    """ExcelAddressCodec（アドレス変換）のテスト"""

    # column_index_of のテスト

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "letters, expected",
        [
            ("A", 0),
            ("Z", 25),
            ("AA", 26),
            ("AZ", 51),
            ("BA", 52),
            ("ZZ", 701),
            ("AAA", 702),
        ],
    )
    def test_column_index_of_known_values(self, letters, expected):
        """既知の列文字が正しい列番号に変換されること"""
        assert ExcelAddressCodec.column_index_of(letters) == expected

    @pytest.mark.unit
    def test_column_index_of_empty(self):
        """空文字は0になること"""
        assert ExcelAddressCodec.column_index_of("") == 0

    @pytest.mark.unit
    def test_column_index_of_lowercase(self):
        """小文字も大文字と同じに扱われること"""
        assert ExcelAddressCodec.column_index_of("af") == ExcelAddressCodec.column_index_of("AF")

    @pytest.mark.unit
    def test_column_index_of_invalid_character(self):
        """英字以外を含む場合はMalformedAddressErrorになること"""
        with pytest.raises(MalformedAddressError):
            ExcelAddressCodec.column_index_of("A1")

    @pytest.mark.unit
    def test_column_index_of_matches_recursive_definition(self):
        """ループ実装が再帰定義と一致すること"""
        for letters in ["A", "M", "Z", "AA", "AF", "QZ", "ZZ", "AAA", "XFD", "ABCD"]:
            assert ExcelAddressCodec.column_index_of(letters) == _column_index_recursive(letters)

    @pytest.mark.unit
    def test_column_index_of_matches_openpyxl(self):
        """openpyxl（1始まり）と1つずれた値になること"""
        for letters in ["A", "Z", "AA", "XFD"]:
            assert ExcelAddressCodec.column_index_of(letters) == column_index_from_string(letters) - 1

    @pytest.mark.unit
    def test_columns_beyond_three_letters(self):
        """openpyxlが扱えない4文字以上の列も相互変換できること"""
        assert ExcelAddressCodec.column_index_of("ZZZ") == 18277
        assert ExcelAddressCodec.letters_of(18278) == "AAAA"
        assert ExcelAddressCodec.column_index_of("AAAA") == 18278
        assert ExcelAddressCodec.split_address("AAAA7") == (18278, 7)

    # letters_of のテスト

    @pytest.mark.unit
    def test_letters_of_single_letter(self):
        """26未満は1文字になること"""
        assert ExcelAddressCodec.letters_of(0) == "A"
        assert ExcelAddressCodec.letters_of(25) == "Z"

    @pytest.mark.unit
    def test_letters_of_multiple_letters(self):
        """26以上は複数文字になること"""
        assert ExcelAddressCodec.letters_of(26) == "AA"
        assert ExcelAddressCodec.letters_of(51) == "AZ"
        assert ExcelAddressCodec.letters_of(52) == "BA"
        assert ExcelAddressCodec.letters_of(701) == "ZZ"
        assert ExcelAddressCodec.letters_of(702) == "AAA"

    @pytest.mark.unit
    def test_letters_of_negative(self):
        """負の列番号はValueErrorになること"""
        with pytest.raises(ValueError):
            ExcelAddressCodec.letters_of(-1)

    @pytest.mark.unit
    def test_letters_of_matches_openpyxl(self):
        """openpyxlのget_column_letterと一致すること"""
        for index in [0, 25, 26, 700, 16383]:
            assert ExcelAddressCodec.letters_of(index) == get_column_letter(index + 1)

    @pytest.mark.unit
    def test_round_trip_index(self):
        """列番号 -> 列文字 -> 列番号 で元に戻ること（openpyxlの上限を超える範囲も含む）"""
        for index in list(range(0, 20000)) + [123456, 10**7]:
            assert ExcelAddressCodec.column_index_of(ExcelAddressCodec.letters_of(index)) == index

    @pytest.mark.unit
    def test_round_trip_letters(self):
        """列文字 -> 列番号 -> 列文字 で元に戻ること"""
        for letters in ["A", "Q", "Z", "AA", "AZ", "BA", "ZZ", "AAA", "XFD", "ZZZZ"]:
            assert ExcelAddressCodec.letters_of(ExcelAddressCodec.column_index_of(letters)) == letters

    # parse_address / split_address / format_address のテスト

    @pytest.mark.unit
    def test_parse_address(self):
        """アドレスが列文字と行番号に分解されること"""
        assert ExcelAddressCodec.parse_address("B12") == ("B", 12)
        assert ExcelAddressCodec.parse_address("xfd1048576") == ("xfd", 1048576)

    @pytest.mark.unit
    @pytest.mark.parametrize("address", ["", "A", "12", "1A", "A1B", "A1B2", "A 1", "$A$1", "A0"])
    def test_parse_address_malformed(self, address):
        """英字+数字に完全一致しないアドレスはMalformedAddressErrorになること"""
        with pytest.raises(MalformedAddressError) as exc_info:
            ExcelAddressCodec.parse_address(address)

        assert exc_info.value.address == address

    @pytest.mark.unit
    def test_split_address(self):
        """アドレスが(列番号, 行番号)に変換されること"""
        assert ExcelAddressCodec.split_address("A1") == (0, 1)
        assert ExcelAddressCodec.split_address("C5") == (2, 5)
        assert ExcelAddressCodec.split_address("AA10") == (26, 10)

    @pytest.mark.unit
    def test_format_address(self):
        """(列番号, 行番号)からアドレスが生成されること"""
        assert ExcelAddressCodec.format_address(0, 1) == "A1"
        assert ExcelAddressCodec.format_address(27, 300) == "AB300"

    @pytest.mark.unit
    def test_format_then_split(self):
        """format_address と split_address が逆変換になること"""
        for column, row in [(0, 1), (25, 2), (26, 99), (701, 1048576)]:
            address = ExcelAddressCodec.format_address(column, row)
            assert ExcelAddressCodec.split_address(address) == (column, row)
