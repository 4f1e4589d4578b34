from pathlib import Path
from typing import List, Optional

import pytest
from loguru import logger


def model_text(trees: int, body: List[str], committee: str = "2 (RandomForest)",
               features: int = 54, maxdepth: int = 20) -> str:
    header = [
        f"committee: {committee}",
        f"trees: {trees}",
        f"features: {features}",
        f"maxdepth: {maxdepth}",
        "fpnfactor: 1",
    ]
    return "".join(line + "\n" for line in header + body)


@pytest.fixture
def write_model(tmp_path):
    """Factory writing a model file under tmp_path and returning its path."""
    def _write(name: str, trees: Optional[int] = None, body: Optional[List[str]] = None, **header) -> Path:
        body = body if body is not None else [f"{name}-tree-{i}" for i in range(trees or 0)]
        path = tmp_path / name
        path.write_text(model_text(len(body) if trees is None else trees, body, **header), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def log_messages():
    records = []
    sink_id = logger.add(lambda msg: records.append(msg.record), level="DEBUG")
    yield records
    logger.remove(sink_id)


@pytest.fixture(autouse=True)
def _reset_loguru(monkeypatch):
    for name in ("COMBINE_MODELS_LOG_LEVEL", "COMBINE_MODELS_LOG_FILE", "COMBINE_MODELS_ECHO_HEADER"):
        monkeypatch.delenv(name, raising=False)
    yield
    # sinks may point at pytest capture streams that are about to close
    logger.remove()
