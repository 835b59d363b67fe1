from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config, resolve_config_path
from ..excel.merge import fill_merged_cells
from ..excel.reader import WorkbookReadError, read_workbook
from ..excel.structure import analyze_structure
from ..logging.init import get_logger, log_summary, setup_logging
from ..models.config_models import EXPORT_FORMATS, ExtractConfig
from ..models.structure import SheetStructure
from ..services.enumeration import detect_start_column
from ..services.orchestrator import ProcessingError, process_all, scan_excel_files
from ..services.summary import render_sheet_counts, render_summary_line

"""CLI entrypoint.

    python -m tasksheet.cli [paths ...] [--config FILE] [--format json|ini|template]
                            [--query QUERY] [--debug] [--inspect-data]

Exit codes: 0 every workbook extracted (or none found), 2 some workbooks
failed, 1 fatal (bad config, missing source directory, every workbook failed).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env (TASKSHEET_CONFIG may be set there). A broken file only warns."""
    if not path.exists():
        return
    try:
        load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:  # pragma: no cover
        get_logger().warning(f"failed to load {path}: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="tasksheet",
        description="Extract task definitions from Excel templates and encode task parameters",
    )
    p.add_argument("paths", nargs="*", type=Path, help="Workbooks to extract (default: scan source_directory)")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: $TASKSHEET_CONFIG or config/extract.yml)")
    p.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=EXPORT_FORMATS,
        help="Export format, repeatable (overrides config)",
    )
    p.add_argument("--query", default=None, help='Search filter for the template export, e.g. "type:表端 period:15"')
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print detected sheet structure then exit")
    return p.parse_args(argv)


def _describe_structure(structure: SheetStructure) -> str:
    found = [
        f"{name}={value}"
        for name, value in vars(structure).items()
        if name.endswith("_row") and value != -1
    ]
    return " ".join(found) if found else "(no labelled rows)"


def _inspect_data(cfg: ExtractConfig, paths: list[Path]) -> int:
    if not paths:
        try:
            paths = scan_excel_files(Path(cfg.source_directory))
        except ProcessingError as e:
            print(f"inspect: {e}")
            return EXIT_FATAL
    if not paths:
        print("inspect: no workbooks")
        return EXIT_SUCCESS_ALL
    for f in paths:
        print(f"FILE: {f.name}")
        try:
            sheets = read_workbook(f, cfg.target_sheets)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for name, sheet in sheets.items():
            grid = fill_merged_cells(sheet.rows, sheet.merges)
            structure = analyze_structure(grid)
            print(
                f"  SHEET: {name} rows={sheet.row_count} cols={sheet.max_columns} merges={len(sheet.merges)}"
                f" single_task={structure.is_single_task_mode} multi_row={structure.is_multi_row_mode}"
                f" start_col={detect_start_column(grid, structure)}"
            )
            print(f"    {_describe_structure(structure)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # argv=[] (tests) must not fall back to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        setup_logging(debug=True)

    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.formats:
        cfg = replace(cfg, formats=tuple(dict.fromkeys(args.formats)))

    paths: list[Path] = list(args.paths)
    if args.inspect_data:
        return _inspect_data(cfg, paths)

    if paths:
        logger.info(f"Extracting {len(paths)} workbook(s)")
    else:
        directory = Path(cfg.source_directory)
        if not directory.exists():
            logger.error(f"directory not found: {directory}")
            return EXIT_FATAL
        logger.info(f"Extracting workbooks from: {directory}")

    try:
        result = process_all(cfg, paths or None, query=args.query)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for extraction in result.results:
        for line in render_sheet_counts(extraction):
            logger.info(line)

    summary_line = render_summary_line(result.total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files == 0:
        return EXIT_SUCCESS_ALL
    if result.success_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
