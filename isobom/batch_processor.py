"""
Batch-process a folder of pipe isometric drawings (PDFs or images) and save
the Bill of Materials of each one as its own Excel file.

Run with: python -m isobom.batch_processor <input_dir> <output_dir> <log_file>
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from isobom.config import BATCH_SIZE
from isobom.batch.driver import discover_documents, run_batch
from isobom.batch.report import BatchRunReport
from isobom.bom_extraction.errors import MissingCredentials
from isobom.bom_extraction.extractor import BOMExtractor, get_genai_client


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Extract BOM tables from every drawing in a folder into Excel files.")
    p.add_argument("input_dir", help="Folder containing the drawings (no recursion)")
    p.add_argument("output_dir", help="Folder the Excel files are written to (created if missing)")
    p.add_argument("log_file", help="Path of the log file for this run")
    p.add_argument("--batch-size", type=int, default=BATCH_SIZE, help="Files processed concurrently")
    args = p.parse_args(argv)
    if args.batch_size < 1:
        p.error(f"--batch-size must be at least 1, got {args.batch_size}")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir)

    with BatchRunReport(args.log_file) as report:
        report.log("--- Starting Batch BOM Extraction ---")

        try:
            client = get_genai_client()
        except MissingCredentials as e:
            report.log(f"❌ ERROR: {e}")
            sys.exit(1)

        try:
            if not input_dir.is_dir():
                raise FileNotFoundError(f"Input folder not found: {input_dir}")
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            report.log(f"❌ ERROR: Could not access input/output directories. Details: {e}")
            sys.exit(1)

        report.log(f"📁 Input folder: {input_dir}")
        report.log(f"📁 Output folder: {output_dir}")
        report.log(f"📝 Logging to: {args.log_file}")
        report.log("")

        paths = discover_documents(input_dir)
        if not paths:
            report.log("🟡 No PDF or image files found. Exiting.")
            return 0

        report.log(f"✅ Found {len(paths)} file(s) to process.")
        report.log("")

        asyncio.run(
            run_batch(
                paths,
                report,
                extractor=BOMExtractor(client=client),
                output_dir=output_dir,
                width=args.batch_size,
            )
        )
        report.finalize()

    return 0


if __name__ == "__main__":
    sys.exit(main())
