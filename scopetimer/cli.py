#!filepath: scopetimer/cli.py
from typing import Optional

import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from scopetimer import __version__
from scopetimer.config import LogConfig, load_env_file, settings
from scopetimer.observability.sink import LOG_FILE_NAME, sink_registry
from scopetimer.utils.errors import UserInputError
from scopetimer.utils.logger import logs

app = typer.Typer(help="ScopeTimer CLI")


def _fail(e: UserInputError) -> None:
    print(f"[red]{escape(str(e))}[/red]")
    raise typer.Exit(code=1)


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def demo(
    iterations: int = typer.Option(1, "--iterations", "-n", min=1, help="demo 运行次数"),
    threads: int = typer.Option(3, "--threads", "-t", min=1, help="threadedWork 的线程数"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="先加载的 .env 文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出内部诊断日志"),
):
    """
    运行示例负载，把计时写入 $SCOPE_TIMER_DIR/ScopeTimer.log
    """
    from scopetimer.demo import run_demo

    if verbose:
        logs.configure(LogConfig(level="DEBUG"))

    try:
        load_env_file(env_file)
    except UserInputError as e:
        _fail(e)

    cfg = settings()
    if not cfg.enabled:
        print("[yellow]SCOPE_TIMER is disabled; no timings will be written[/yellow]")

    print(f"[green]Running demo x{iterations} ({threads} threads)[/green]")
    run_demo(iterations=iterations, threads=threads)
    logs.info(f"[CLI] demo finished: iterations={iterations} threads={threads}")

    sink_registry().close()
    print(f"[blue]log: {escape(cfg.log_dir + LOG_FILE_NAME)}[/blue]")


@app.command()
def summarize(
    path: str = typer.Argument(..., help="ScopeTimer.log 路径"),
    series: bool = typer.Option(False, "--series", help="同时输出每个 key 的全部耗时"),
):
    """
    按 "[label] where" 汇总：count / min / avg / max / trend
    """
    from scopetimer.observability.summary import (
        format_us,
        read_records,
        series_by_key,
        summarize as summarize_records,
    )

    try:
        records = read_records(path)
    except UserInputError as e:
        _fail(e)

    df = summarize_records(records)

    table = Table(title=f"ScopeTimer summary ({len(records)} lines)")
    for col in ("key", "count", "min", "avg", "max", "trend"):
        table.add_column(col)
    for row in df.itertuples(index=False):
        table.add_row(
            escape(row.key),
            str(row.count),
            format_us(row.min_us),
            format_us(row.avg_us),
            format_us(row.max_us),
            row.trend,
        )
    print(table)

    if series:
        for key, values in series_by_key(records).items():
            print(escape(key))
            print("  " + " ".join(format_us(v) for v in values))


@app.command()
def strip(path: str = typer.Argument(..., help="ScopeTimer.log 路径")):
    """
    去掉 TID / start / end 字段（便于 diff）
    """
    from pathlib import Path

    from scopetimer.observability.summary import strip_timestamps

    p = Path(path)
    if not p.is_file():
        _fail(UserInputError(f"log file not found: {p}"))

    with open(p, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            typer.echo(strip_timestamps(line.rstrip("\n")))


if __name__ == "__main__":
    app()
