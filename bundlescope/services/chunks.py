from __future__ import annotations

from collections.abc import Sequence

from bundlescope.models.report import ChunkAnalysis
from bundlescope.models.stats import Chunk

LARGE_AVERAGE_CHUNK_BYTES = 500_000
SMALL_AVERAGE_CHUNK_BYTES = 50_000
MANY_CHUNKS = 20
LARGE_INITIAL_BYTES = 500_000
IMBALANCE_RATIO = 10


def analyze_chunks(chunks: Sequence[Chunk]) -> ChunkAnalysis:
    if not chunks:
        return ChunkAnalysis()

    count = len(chunks)
    total = sum(c.size for c in chunks)
    average = total / count
    largest = max(chunks, key=lambda c: c.size)
    smallest = min(chunks, key=lambda c: c.size)
    initial = sum(c.size for c in chunks if c.initial)

    advice: list[str] = []
    if average > LARGE_AVERAGE_CHUNK_BYTES:
        advice.append(
            f"Average chunk size is {average / 1024:.2f}KB; split large chunks with dynamic imports"
        )
    if count > MANY_CHUNKS and average < SMALL_AVERAGE_CHUNK_BYTES:
        advice.append(
            f"{count} chunks averaging {average / 1024:.2f}KB; merge small chunks to cut request overhead"
        )
    if initial > LARGE_INITIAL_BYTES:
        advice.append(f"Initial chunks total {initial / 1024:.2f}KB; defer non-critical code to lazy chunks")
    # A zero-byte smallest chunk makes the ratio meaningless.
    if smallest.size > 0 and largest.size > IMBALANCE_RATIO * smallest.size:
        advice.append(
            f"Chunk sizes are unbalanced: {largest.name} is {largest.size / smallest.size:.1f}x {smallest.name}"
        )

    return ChunkAnalysis(
        average_chunk_size=average,
        average_modules_per_chunk=sum(len(c.modules) for c in chunks) / count,
        largest_chunk=largest,
        smallest_chunk=smallest,
        initial_chunk_size=initial,
        recommendations=tuple(advice),
    )
