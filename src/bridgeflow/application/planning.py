from __future__ import annotations
from ..domain.models import Chunk

def plan_chunks(start_block: int, end_block: int, step: int) -> list[Chunk]:
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    out: list[Chunk] = []
    b = start_block
    while b <= end_block:
        fb, tb = b, min(end_block, b + step - 1)
        out.append(Chunk(start=fb, end=tb))
        b = tb + 1
    return out

def shrink_end(start: int, end: int) -> int:
    """New end after halving [start, end] from the same start block."""
    return start + (end - start + 1) // 2
