from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import pandas as pd

from .errors import FieldParseError
from .logging_setup import get_logger
from .source import filter_data_lines, load_rows

logger = get_logger(__name__)

# 出力 CSV の列順（Purpose / Method は後で手入力するので常に空）
OUTPUT_COLUMNS = ["Date", "Item", "Amount", "Purpose", "Method"]

# strconv.Atoi 相当: 符号付き 10 進数のみ（桁区切り・全角数字は不可）
_AMOUNT_RE = re.compile(r"[+-]?[0-9]+")
# strconv.Atoi と同じく int64 に収まらない値は不正
_AMOUNT_MIN, _AMOUNT_MAX = -(2**63), 2**63 - 1


@dataclass(frozen=True)
class SourceLayout:
    """Column positions of one Vpass export format."""

    name: str
    date_col: int
    label_col: int
    amount_col: int
    method_col: Optional[int] = None
    line_filter: Optional[Callable[[str], str]] = None


# 確定明細: 利用日, 利用店名, 利用金額, 支払区分, 今回回数, 支払金額, 備考(決済手段)
FIXED = SourceLayout(
    name="fixed",
    date_col=0,
    label_col=1,
    amount_col=2,
    method_col=6,
    line_filter=filter_data_lines,
)

# 未確定明細: 13 列。金額は 6 列目、それ以外の列は使わない
NON_FIXED = SourceLayout(
    name="non-fixed",
    date_col=0,
    label_col=1,
    amount_col=6,
)


@dataclass(frozen=True)
class SourceRecord:
    date: str
    label: str
    amount: int
    method: str = ""


@dataclass(frozen=True)
class OutputRecord:
    date: str
    item: str
    amount: int


def _cell(row: Sequence[str], col: Optional[int]) -> str:
    if col is None or col >= len(row):
        return ""
    return row[col]


def parse_amount(raw: str, row: int) -> int:
    if not _AMOUNT_RE.fullmatch(raw):
        raise FieldParseError(row=row, field="amount", raw=raw)
    amount = int(raw)
    if not _AMOUNT_MIN <= amount <= _AMOUNT_MAX:
        raise FieldParseError(row=row, field="amount", raw=raw)
    return amount


def parse_rows(rows: Sequence[Sequence[str]], layout: SourceLayout) -> list[SourceRecord]:
    """Map tabulized rows to SourceRecords by the layout's column indices.

    Row numbers in errors are 1-based positions in ``rows``, i.e. after the
    header lines of the fixed export were filtered out.
    """
    records = []
    for i, row in enumerate(rows, start=1):
        records.append(
            SourceRecord(
                date=_cell(row, layout.date_col),
                label=_cell(row, layout.label_col),
                amount=parse_amount(_cell(row, layout.amount_col), i),
                method=_cell(row, layout.method_col),
            )
        )
    return records


def to_output(record: SourceRecord) -> OutputRecord:
    # 決済手段 (例: ﾌｱﾐﾘ-ﾏ-ﾄ/ID) があれば店名の後ろに半角スペースで連結
    item = f"{record.label} {record.method}" if record.method else record.label
    return OutputRecord(date=record.date, item=item, amount=record.amount)


def normalize(raw: bytes, layout: SourceLayout = FIXED) -> pd.DataFrame:
    """Normalize a Vpass statement (Shift‑JIS bytes) into the output frame.

    Steps:
    1. Decode *Shift-JIS* and, for the fixed export, drop non-data lines
    2. Split into CSV rows and pick columns by ``layout``
    3. Parse `amount` to int and merge the method tag into `item`
    4. Add the empty *Purpose* / *Method* columns in *OUTPUT_COLUMNS* order
    """
    rows = load_rows(raw, layout.line_filter)
    return to_frame(parse_rows(rows, layout))


def to_frame(records: Sequence[SourceRecord]) -> pd.DataFrame:
    """SourceRecord の列を出力用 DataFrame にする"""
    outputs = [to_output(r) for r in records]
    logger.debug("mapped %d records", len(outputs))

    # --- DataFrame 化 ---------------------------------------------------
    df = pd.DataFrame(
        [(r.date, r.item, r.amount, "", "") for r in outputs],
        columns=OUTPUT_COLUMNS,
    )
    df["Amount"] = df["Amount"].astype("int64")
    return df
