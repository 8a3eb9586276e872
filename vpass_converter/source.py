"""
Vpass 明細 CSV の読み込みユーティリティ
────────────────────────────────────────────────────
* Vpass の CSV は Shift-JIS (Windows-31J) で出力される。
* 確定 (fixed) 明細にはカード名義の見出し行が請求グループごとに
  挟まるため、"20" で始まる行だけを残してから CSV として読む。
* 未確定 (non-fixed) 明細には見出し行が無いのでそのまま読む。
"""

from __future__ import annotations

import csv
import io
from os import PathLike
from pathlib import Path
from typing import Callable, Optional

import pandas as pd

from .errors import DecodeError, MalformedCSVError, SourceIOError

# ── Vpass 固有定数 ──────────────────────────────────────
SOURCE_ENCODING = "cp932"   # Shift_JIS の Windows 拡張。"－" 等を含む
DATA_LINE_PREFIX = "20"     # 利用日 (20xx/..) で始まる行だけがデータ行


# ── ファイル読み込み ─────────────────────────────────────
def read_source(path: str | PathLike[str]) -> bytes:
    """Read the whole statement file into memory."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise SourceIOError(f"cannot read {Path(path)}") from e


def decode(raw: bytes) -> str:
    try:
        return raw.decode(SOURCE_ENCODING)
    except UnicodeDecodeError as e:
        raise DecodeError("source is not valid Shift-JIS") from e


# ── 見出し行の除去 ──────────────────────────────────────
def filter_data_lines(text: str) -> str:
    """Keep only lines starting with ``"20"``.

    Cardholder header lines such as ``大村　幸佑　様,0000-...,ＶＩＳＡ`` have a
    different column count and would break positional parsing.
    """
    lines = (line.rstrip("\r") for line in text.split("\n"))
    kept = [line for line in lines if line.startswith(DATA_LINE_PREFIX)]
    return "".join(line + "\n" for line in kept)


# ── CSV 分割 ────────────────────────────────────────────
def tabulize(text: str) -> list[list[str]]:
    """Split decoded CSV text into rows of verbatim string fields."""
    try:
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise MalformedCSVError("invalid CSV") from e

    _check_field_counts(text)
    return df.fillna("").values.tolist()


def _check_field_counts(text: str) -> None:
    # pandas は 1 行目より短い行を黙って埋めるので、列数は別に数える
    widths = [len(r) for r in csv.reader(io.StringIO(text, newline="")) if r]
    for i, width in enumerate(widths, start=1):
        if width != widths[0]:
            raise MalformedCSVError(
                f"wrong number of fields: record {i} has {width}, expected {widths[0]}"
            )


def load_rows(raw: bytes, line_filter: Optional[Callable[[str], str]] = None) -> list[list[str]]:
    """Decode -> (filter) -> tabulize."""
    text = decode(raw)
    if line_filter is not None:
        text = line_filter(text)
    return tabulize(text)
