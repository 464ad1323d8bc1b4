from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from protowatch.config import CompilerConfig, ProtoWatchConfig


@pytest.fixture
def write_go(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write dedented Go source into the pytest tmp_path and return its path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config(tmp_path: Path) -> ProtoWatchConfig:
    """Provide a config whose folders all live under tmp_path."""
    watch = tmp_path / "models"
    out = tmp_path / "proto"
    gen = tmp_path / "gen"
    ts_gen = tmp_path / "ts-gen"
    for folder in (watch, out, gen, ts_gen):
        folder.mkdir()
    return ProtoWatchConfig(
        watch_folder=watch,
        out_folder=out,
        gen_folder=Path("gen"),
        ts_gen_folder=ts_gen,
        compiler=CompilerConfig(enabled=False),
    )
