from pathlib import Path

from invoke import task
from invoke.exceptions import Exit


@task
def backfill(c, export, config="ladder.yaml", reset=False):
    """Replay a channel export into the configured database."""
    if not Path(export).exists():
        raise Exit(f"Missing export: {export}")
    flags = " --reset" if reset else ""
    c.run(f"wordle-ladder backfill {export} --config {config}{flags}")


@task
def lint(c):
    c.run("ruff check .")


@task
def format_check(c):
    c.run("ruff format --check .")


@task
def test(c):
    c.run("pytest")


@task
def ci(c):
    lint(c)
    format_check(c)
    test(c)
