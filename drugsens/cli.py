#!filepath: drugsens/cli.py
from pathlib import Path
from typing import Optional

import typer
from rich import print

from drugsens import __version__
from drugsens.config.app_config import AppConfig
from drugsens.utils.errors import DrugSensError
from drugsens.utils.logger import logs
from drugsens.workflows.offline_pipeline import STAGE_ORDER, build_pipeline

app = typer.Typer(help="Drug sensitivity (LN_IC50) prediction pipeline CLI")

ConfigOption = typer.Option(None, "--config", "-c", help="YAML config (default: $DRUGSENS_CONFIG or packaged base.yml)")
ForceOption = typer.Option(False, "--force", help="Regenerate a persisted split that no longer matches the config")


def _run(stages, config: Optional[Path], force: bool = False):
    try:
        cfg = AppConfig.load(config)
        logs.configure(
            log_dir=cfg.log.dir,
            rotation=cfg.log.rotation,
            retention=cfg.log.retention,
            level=cfg.log.level,
        )

        print(f"[green]Running {' → '.join(stages)}[/green] output={cfg.paths.output_dir}")
        pipeline = build_pipeline(cfg, stages=stages)
        ctx = pipeline.run(force=force)
    except DrugSensError as e:
        print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(code=1)

    print(f"[green]Done[/green] run_id={ctx.run_id}")
    return ctx


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def preprocess(config: Optional[Path] = ConfigOption):
    """
    读取原始数据 → schema → 清洗 → cleaned.parquet
    """
    _run(["preprocess"], config)


@app.command()
def split(config: Optional[Path] = ConfigOption, force: bool = ForceOption):
    """
    80/20 train/test split（持久化 split_indices.json）
    """
    _run(["split"], config, force=force)


@app.command()
def encode(config: Optional[Path] = ConfigOption):
    """
    按策略编码 train / test，保存 mapping
    """
    _run(["encode"], config)


@app.command()
def train(config: Optional[Path] = ConfigOption):
    """
    strategies × models 训练与评估
    """
    _run(["train"], config)


@app.command()
def report(config: Optional[Path] = ConfigOption):
    """
    模型排名汇总
    """
    _run(["report"], config)


@app.command()
def run(config: Optional[Path] = ConfigOption, force: bool = ForceOption):
    """
    运行完整 Pipeline（preprocess → split → encode → train → report）
    """
    _run(list(STAGE_ORDER), config, force=force)


if __name__ == "__main__":
    app()

# python -m drugsens.cli run --config my.yml
