# /combine_models/forest_module/combiner.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Sequence, TextIO

from .logger import get_child_logger
from .model_file import (
    HEADER_SIZE,
    ModelFileError,
    ModelFileInfo,
    ModelHeader,
    PathLike,
    inspect_model,
    iter_body,
)

log = get_child_logger("combiner")


class CombineError(ValueError):
    """The combination request itself is invalid (e.g. no inputs)."""


@dataclass
class CombineResult:
    trees: int
    gross_length: int
    header: ModelHeader
    inputs: List[ModelFileInfo] = field(default_factory=list)


def _check_consistency(inputs: Sequence[ModelFileInfo]) -> None:
    reference = inputs[0].header.shape()
    for info in inputs:
        shape = info.header.shape()
        diff = {k: (reference[k], v) for k, v in shape.items() if v != reference[k]}
        if diff:
            log.warning("Header of {} differs from {}: {}", info.path, inputs[0].path, diff)

        declared = info.header.trees
        if declared is not None and declared != info.body_lines:
            log.debug("{} declares trees: {} but has {} body lines", info.path, declared, info.body_lines)


def plan_combination(paths: Sequence[PathLike]) -> CombineResult:
    """
    Inspect every input and compute the combined header without writing anything.

    gross_length counts every line of every input; the combined tree count
    is gross_length minus one header per input.
    """
    if not paths:
        raise CombineError("at least one model file is required")

    inputs = [inspect_model(p) for p in paths]
    gross_length = sum(info.total_lines for info in inputs)
    real_length = gross_length - HEADER_SIZE * len(inputs)

    template = inputs[0].header
    if not template.has_trees():
        raise ModelFileError(f"corrupt input file: {inputs[0].path} (no 'trees:' line in header)", inputs[0].path)

    _check_consistency(inputs)
    log.info("Combining {} model files: {} lines, {} trees", len(inputs), gross_length, real_length)

    return CombineResult(
        trees=real_length,
        gross_length=gross_length,
        header=template.with_trees(real_length),
        inputs=inputs,
    )


def write_combined(plan: CombineResult, out: BinaryIO, echo: Optional[TextIO] = None) -> None:
    """Write the rewritten header, then each input body in order. Bodies are copied as raw bytes."""
    if echo is not None:
        echo.write(plan.header.render())
        echo.flush()

    out.write(plan.header.render_bytes())
    for info in plan.inputs:
        written = 0
        for line in iter_body(info.path):
            out.write(line)
            written += 1
        log.debug("Appended {} body lines from {}", written, info.path)
    out.flush()


def combine_models(paths: Sequence[PathLike], out: BinaryIO, echo: Optional[TextIO] = None) -> CombineResult:
    """
    Concatenate forest model files into `out`.

    Every input is validated before the first byte is written, so a bad
    input never leaves a partial combined model behind.
    """
    plan = plan_combination(paths)
    write_combined(plan, out, echo=echo)
    return plan


__all__ = [
    "CombineError",
    "CombineResult",
    "combine_models",
    "plan_combination",
    "write_combined",
]
