"""Run BOM extraction over many drawing files, a few at a time."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TypeVar

from isobom.config import BATCH_SIZE
from isobom.models import AnalyzedFile
from isobom.batch.report import BatchRunReport
from isobom.bom_extraction.extractor import BOMExtractor, extract_bom_from_file
from isobom.bom_extraction.segmenter import guess_media_kind, is_supported
from isobom.export.merger import base_name, unique_file_names, write_workbook

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Consecutive groups of at most ``size`` items, order preserved."""
    if size < 1:
        raise ValueError(f"Group size must be at least 1, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def discover_documents(input_dir: str | Path) -> List[Path]:
    """PDFs and images directly inside ``input_dir``, sorted by name."""
    input_dir = Path(input_dir)
    return sorted(
        p for p in input_dir.iterdir()
        if p.is_file() and is_supported(guess_media_kind(p))
    )


async def process_document(
    path: Path,
    position: int,
    total: int,
    report: BatchRunReport,
    extractor: BOMExtractor,
    output_dir: Optional[Path] = None,
    output_name: Optional[str] = None,
) -> AnalyzedFile:
    """Extract one file. Any failure stays with this file and is only logged."""
    prefix = f"  [{position}/{total}]"
    file_name = path.name
    report.log(f"{prefix} ⏳ Analyzing: {file_name}...")

    try:
        items = await extract_bom_from_file(path, extractor=extractor)

        if not items:
            report.log(f"{prefix} 🟡 Warning: No BOM items found in {file_name}. Skipping Excel creation.")
            report.record_warning()
            return AnalyzedFile(file_name=file_name)

        report.log(f"{prefix} ✔️ AI analysis complete for {file_name}.")
        if output_dir is not None:
            output_path = output_dir / (output_name or f"{base_name(file_name)}.xlsx")
            report.log(f"{prefix} 💾 Saving Excel file to {output_path.name}...")
            await asyncio.to_thread(write_workbook, items, output_path)
            report.log(f"{prefix} ✨ Successfully exported {output_path.name}")

        report.record_success()
        return AnalyzedFile(file_name=file_name, bom_items=items)

    except Exception as e:
        report.log(f"{prefix} ❌ Error processing {file_name}: {e}")
        report.record_failure()
        return AnalyzedFile(file_name=file_name)


async def run_batch(
    paths: Iterable[str | Path],
    report: BatchRunReport,
    extractor: Optional[BOMExtractor] = None,
    output_dir: Optional[str | Path] = None,
    width: int = BATCH_SIZE,
) -> List[AnalyzedFile]:
    """
    Process ``paths`` in groups of ``width``.

    Groups run one after another; the files of a group run concurrently and
    the next group only starts once every file of the current one has
    finished, so at most ``width`` model calls are in flight. Results come
    back in input order.

    Workbook names are fixed for the whole run before anything starts, so
    'A.png' and 'A.jpg' end up as 'A.xlsx' and 'A-2.xlsx'.

    Raises MissingCredentials before any file is touched when the extractor
    has no usable client.
    """
    paths = [Path(p) for p in paths]
    groups = chunked(paths, width)
    extractor = extractor or BOMExtractor()
    extractor.client  # resolves the lazy client up front
    output_dir = Path(output_dir) if output_dir is not None else None
    output_names = unique_file_names(base_name(p.name) for p in paths)

    total = len(paths)
    report.total_files += total

    results: List[AnalyzedFile] = []
    for number, group in enumerate(groups, start=1):
        report.log(f"--- Processing Batch {number} of {len(groups)} ({len(group)} files) ---")
        offset = (number - 1) * width
        tasks = [
            process_document(
                path, offset + i + 1, total, report, extractor, output_dir, output_names[offset + i]
            )
            for i, path in enumerate(group)
        ]
        results.extend(await asyncio.gather(*tasks))
    return results
