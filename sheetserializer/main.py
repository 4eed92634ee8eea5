import json
import logging
import sys

import typer

from sheetserializer.config import config
from sheetserializer.error_messages import SpreadsheetError
from sheetserializer.excel import CellRepository, ExcelPackage, ExcelSheetSelector

# typerアプリケーションを作成
app = typer.Typer()


def setup_logging():
    """
    すべてのログ出力をstderrに向けるロギングを設定します。
    これにより、JSONを出力するstdoutが汚染されるのを防ぎます。
    """
    log_formatter = logging.Formatter("%(asctime)s [%(levelname)s] - %(message)s")
    root_logger = logging.getLogger()
    root_logger.setLevel(config.log_level_value)

    # stdoutへの出力を防ぐため、既存のハンドラをクリア
    root_logger.handlers.clear()

    # stderrにログを出力するハンドラを追加
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(log_formatter)
    root_logger.addHandler(stream_handler)

    for error in config.validate():
        logging.warning(f"Invalid configuration: {error}")


@app.callback()
def main():
    """
    xlsxワークブックの内容を確認します。
    """
    setup_logging()


@app.command()
def sheets(path: str = typer.Argument(..., help="xlsxファイルのパス。")):
    """
    ワークブック内のシート名を文書順に表示します。
    """
    try:
        with ExcelPackage(path) as package:
            for name in package.sheet_names:
                typer.echo(name)
    except SpreadsheetError as e:
        logging.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def rows(
    path: str = typer.Argument(..., help="xlsxファイルのパス。"),
    sheet: str = typer.Option(
        "", "--sheet", help="シート名（見つからない場合は先頭シート）。"
    ),
):
    """
    シートを欠損を埋めた矩形テーブルとしてJSONで表示します。
    """
    try:
        with ExcelPackage(path) as package:
            selected = ExcelSheetSelector.select(package.sheet_names, sheet)
            if selected is None:
                logging.error(f"Workbook has no sheets: {path}")
                raise typer.Exit(code=1)

            repository = CellRepository(package.cells(selected), package.shared_strings())

            # セル数上限の確認
            cell_count = repository.row_count * repository.column_count
            if config.has_cell_limit and cell_count > config.max_cells:
                logging.error(
                    f"Sheet '{selected}' has {cell_count} cells, "
                    f"exceeding SHEETSERIALIZER_MAX_CELLS={config.max_cells}"
                )
                raise typer.Exit(code=1)

            result = {
                "sheet": selected,
                "rows": [row.values() for row in repository.rows()],
            }
    except SpreadsheetError as e:
        logging.error(str(e))
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    app()
