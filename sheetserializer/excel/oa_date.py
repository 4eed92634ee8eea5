"""
OLEオートメーション日付の変換

整数部 = 1899-12-30からの日数、小数部 = 時刻（1日に対する割合）。
負の値は「整数部で日付を遡り、小数部で時刻を進める」表現になる。
"""

import datetime
import math

OA_EPOCH = datetime.datetime(1899, 12, 30)
MILLIS_PER_DAY = 86_400_000

# 0001-01-01 から 9999-12-31 に対応する範囲（両端を含まない）
_MIN_OA_DATE = -657435.0
_MAX_OA_DATE = 2958466.0


def from_oa_date(value: float) -> datetime.datetime:
    """
    OA日付（シリアル値）をdatetimeに変換する（ミリ秒に丸める）

    Raises:
        ValueError: 有限でない値、または表現可能な範囲外の値
    """
    if not math.isfinite(value) or not (_MIN_OA_DATE < value < _MAX_OA_DATE):
        raise ValueError(f"Not a legal OLE automation date: {value}")

    millis = int(value * MILLIS_PER_DAY + (0.5 if value >= 0 else -0.5))
    if millis < 0:
        # 小数部（時刻）は常に日付の先頭から正方向に数える
        remainder = -((-millis) % MILLIS_PER_DAY)
        millis -= remainder * 2

    return OA_EPOCH + datetime.timedelta(milliseconds=millis)


def to_oa_date(value: datetime.date) -> float:
    """
    datetime（またはdate）をOA日付（シリアル値）に変換する

    Raises:
        ValueError: タイムゾーン付きのdatetimeの場合
    """
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        raise ValueError("Timezone-aware datetimes cannot be stored as OLE automation dates")

    micros = (value - OA_EPOCH) // datetime.timedelta(microseconds=1)
    # ミリ秒未満は0方向に切り捨てる
    millis = micros // 1000 if micros >= 0 else -(-micros // 1000)
    if millis < 0:
        remainder = -((-millis) % MILLIS_PER_DAY)
        if remainder != 0:
            millis -= (MILLIS_PER_DAY + remainder) * 2

    return millis / MILLIS_PER_DAY
