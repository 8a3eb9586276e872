# vpass_converter/writer.py
from os import PathLike
from pathlib import Path

import pandas as pd

from .errors import SourceIOError

OUTPUT_ENCODING = "utf-8"   # BOM なし


def render_csv(df: pd.DataFrame) -> str:
    """DataFrame を出力 CSV 文字列にする（ヘッダー行 + 入力順の明細）"""
    return df.to_csv(index=False, lineterminator="\n")


def write_csv(df: pd.DataFrame, dst: str | PathLike[str]) -> Path:
    """Render everything first, then write the file in one go."""
    text = render_csv(df)
    path = Path(dst)
    try:
        with open(path, "w", encoding=OUTPUT_ENCODING, newline="") as f:
            f.write(text)
    except OSError as e:
        raise SourceIOError(f"cannot write {path}") from e
    return path
