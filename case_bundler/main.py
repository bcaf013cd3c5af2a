"""
CaseBundler - Command Line Entry Point

Sub-commands:
    export         Export the whole case as one or more archives
    search         List the extractions matching the given filters, grouped by fact
    search-export  Export only the extractions matching the given filters
    preview        Slice one page range of a source PDF to a file
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from case_bundler.errors import DeliveryError, SourceUnavailableError
from case_bundler.export import generate_preview
from case_bundler.export.delivery import DirectoryDelivery
from case_bundler.export.orchestrator import ExportOrchestrator, ExportRunResult
from case_bundler.logging_config import close_debug_log, error, info
from case_bundler.models import DocCategory
from case_bundler.project_loader import load_project
from case_bundler.search import SearchCriteria, group_by_fact, search_case


def _print_progress(percent: int, message: str):
    print(f"  [{percent:3d}%] {message}")
    sys.stdout.flush()


def _print_summary(result: ExportRunResult):
    print("\n" + "=" * 60)
    print("EXPORT SUMMARY")
    print("=" * 60)
    if result.is_noop:
        print("Nothing to export.")
        return

    for path in result.archives:
        print(f"[OK] {path}")
    for skipped in result.skipped:
        print(f"[SKIP] {skipped.display_number or '?'} ({skipped.file_id}, pages {skipped.page_range}): "
              f"{skipped.reason}")
    for name in result.report_failures:
        print(f"[WARN] Report omitted: {name}")

    print("\n" + "=" * 60)
    print(f"Archives: {len(result.archives)} | Files: {result.files_written} | "
          f"Skipped: {len(result.skipped)}")
    print("=" * 60)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CaseBundler - Export classified case PDFs as indexed archives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export the whole case next to the project file
  case-bundler export project.json --output-dir ./exports

  # PDFs live somewhere else
  case-bundler export project.json --root /mnt/case --output-dir ./exports

  # List what a filter would export, grouped by fact
  case-bundler search project.json --person "Jane Doe"

  # Only the reports of one doc type involving one person
  case-bundler search-export project.json --doc-type Report --person "Jane Doe"

  # Debug mode (verbose logging)
  DEBUG=true case-bundler export project.json
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    def add_common(sub):
        sub.add_argument('project', help='Saved project file (JSON)')
        sub.add_argument('--root', help='Folder holding the case PDFs (default: project folder)')

    export_parser = subparsers.add_parser('export', help='Export the whole case')
    add_common(export_parser)
    export_parser.add_argument('--output-dir', default='./exports', help='Archive output folder (default: ./exports)')

    def add_filters(sub):
        sub.add_argument('--number', default='', help='Display number contains')
        sub.add_argument('--article', default='', help='Article list contains')
        sub.add_argument('--summary', default='', help='Summary contains')
        sub.add_argument('--doc-type', default='', help='Exact document type')
        sub.add_argument('--person', default='', help='Exact person name')
        sub.add_argument('--fact', default='', help='Exact fact label')
        sub.add_argument('--category', choices=[c.name.lower() for c in DocCategory],
                         help='Restrict to one category')
        sub.add_argument('--group', default='', help='Group name within the category')

    list_parser = subparsers.add_parser('search', help='List matching extractions grouped by fact')
    add_common(list_parser)
    add_filters(list_parser)
    list_parser.add_argument('--alphabetical', action='store_true',
                             help='Order fact groups by name instead of by their first number')

    search_parser = subparsers.add_parser('search-export', help='Export matching extractions only')
    add_common(search_parser)
    add_filters(search_parser)
    search_parser.add_argument('--output-dir', default='./exports', help='Archive output folder (default: ./exports)')

    preview_parser = subparsers.add_parser('preview', help='Slice one page range to a PDF file')
    add_common(preview_parser)
    preview_parser.add_argument('file_id', help='Source document id')
    preview_parser.add_argument('start', type=int, help='First page (1-based)')
    preview_parser.add_argument('end', type=int, help='Last page (inclusive)')
    preview_parser.add_argument('--output', default='preview.pdf', help='Output PDF (default: preview.pdf)')

    return parser


def _run_preview(args, case) -> int:
    source = case.find_document(args.file_id)
    if source is None:
        error(f"Unknown source document: {args.file_id}")
        return 1
    try:
        data = generate_preview(source, args.start, args.end)
    except SourceUnavailableError as e:
        error(str(e))
        return 1
    Path(args.output).write_bytes(data)
    info(f"Preview written to {args.output}")
    print(f"[OK] {args.output}")
    return 0


def _criteria_from_args(args) -> SearchCriteria:
    return SearchCriteria(
        display_number=args.number,
        article=args.article,
        summary=args.summary,
        doc_type=args.doc_type,
        person=args.person,
        fact=args.fact,
        category=DocCategory[args.category.upper()] if args.category else None,
        group_name=args.group,
    )


def _run_search(args, case) -> int:
    """Print matching extractions grouped by fact, without exporting anything."""
    results = search_case(case, _criteria_from_args(args))
    if not results:
        print("No matching extractions.")
        return 0

    for fact, members in group_by_fact(results, numeric=not args.alphabetical):
        print(f"\n{fact} ({len(members)})")
        for result in members:
            location = result.location
            print(f"  {result.display_number or '-':>8}  {result.doc_type or '-'}  "
                  f"[{location.location_name} vol. {location.volume or '-'}, pages {result.page_range}]")
    print(f"\n{len(results)} extraction(s) matched")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CaseBundler command line.

    Returns:
        Process exit code.
    """
    args = _build_parser().parse_args(argv)

    try:
        case = load_project(args.project, args.root)
    except (OSError, ValueError) as e:
        error(f"Could not load project: {e}")
        print(f"[ERROR] Could not load project: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == 'preview':
            return _run_preview(args, case)
        if args.command == 'search':
            return _run_search(args, case)

        orchestrator = ExportOrchestrator(
            DirectoryDelivery(args.output_dir),
            progress_callback=_print_progress,
        )
        if args.command == 'export':
            result = orchestrator.export_case(case)
        else:
            result = orchestrator.export_search_results(case, search_case(case, _criteria_from_args(args)))
    except DeliveryError as e:
        print(f"[ERROR] {e} ({len(e.delivered)} archive(s) already saved)", file=sys.stderr)
        return 2
    finally:
        close_debug_log()

    _print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
