from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer

from .errors import ConfigError, ConvertError
from .logging_setup import configure_logging, get_logger
from .normalize import FIXED, NON_FIXED, SourceLayout, parse_rows, to_frame
from .source import load_rows, read_source
from .writer import write_csv

EXIT_OK = 0
EXIT_ERROR = 1

logger = get_logger(__name__)

app = typer.Typer(
    name="vpass-convert",
    help="Convert a Vpass transaction list CSV into a finance-tool import CSV.",
    add_completion=False,
)


@dataclass(frozen=True)
class ConvertConfig:
    src: Path
    dst: Path
    layout: SourceLayout = FIXED


def default_dst(src: Path) -> Path:
    """``<src without extension>-converted.csv`` next to the source file."""
    return src.with_name(f"{src.stem}-converted.csv")


def run(config: ConvertConfig) -> int:
    """
    1) Vpass の明細 CSV を読み込む
    2) CSV の行へ分割し、明細として解釈する
    3) UTF-8 の CSV として書き出す

    失敗した段階を ``failed to <stage>: <原因>`` の 1 行でログに出す。
    """
    stage = "open src file"
    try:
        raw = read_source(config.src)
        stage = "load src records"
        rows = load_rows(raw, config.layout.line_filter)
        stage = "parse src records"
        df = to_frame(parse_rows(rows, config.layout))
        # ここまでで失敗した場合は出力ファイルを作らない
        stage = "write output to file"
        dst = write_csv(df, config.dst)
    except ConvertError as e:
        logger.error("failed to %s: %s", stage, e)
        return EXIT_ERROR

    logger.info("✓ Converted %d records: %s", len(df), dst)
    return EXIT_OK


@app.command()
def convert(
    src: Annotated[
        Optional[str],
        typer.Option("--src", help="Path of the transaction list CSV file downloaded from Vpass."),
    ] = None,
    dst: Annotated[
        Optional[str],
        typer.Option(
            "--dst",
            help="Output CSV file path. Defaults to <src>-converted.csv in the src directory.",
        ),
    ] = None,
    srcfixed: Annotated[
        bool,
        typer.Option(
            "--srcfixed/--no-srcfixed",
            help="Vpass has two types of transaction list: fixed and non-fixed.",
        ),
    ] = True,
) -> None:
    """Convert one Vpass statement."""
    configure_logging()

    # 空文字の --src は未指定と同じ扱い
    if not src:
        logger.error("%s", ConfigError("specify src file path with --src option"))
        raise typer.Exit(EXIT_ERROR)

    config = ConvertConfig(
        src=Path(src),
        dst=Path(dst) if dst else default_dst(Path(src)),
        layout=FIXED if srcfixed else NON_FIXED,
    )
    raise typer.Exit(run(config))


if __name__ == "__main__":
    app()
