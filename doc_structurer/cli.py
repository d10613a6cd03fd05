"""Command-line interface for document parsing and LLM structuring.

Provides subcommands for parsing a single document, batch-exporting the
form fields of a folder of documents to CSV, and running the two
structuring stages against JSON request files.
"""

import argparse
import csv
import json
import mimetypes
import sys
from pathlib import Path

from doc_structurer.api.schemas import ParsedDocumentResponse
from doc_structurer.extraction.field_extractor import FormField
from doc_structurer.ocr.document_processor import DocumentProcessor, ParsedDocument
from doc_structurer.structuring.client import StructuringClient
from doc_structurer.structuring.service import StructuringService
from doc_structurer.utils.config import ConfigurationError, load_config
from doc_structurer.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.png", "*.jpg", "*.jpeg", "*.tiff", "*.tif", "*.bmp", "*.pdf")
_BATCH_COLUMNS = ["filename", "status", "key", "value", "error"]


def guess_media_type(path: Path) -> str | None:
    """Guess a document's media type from its file extension."""
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all supported document files in a directory.

    Returns:
        Sorted list of document file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def parse_file(file_path: Path, processor: DocumentProcessor) -> ParsedDocument:
    """Parse one document from disk."""
    return processor.process(
        file_path.read_bytes(), guess_media_type(file_path), file_path.name
    )


def write_form_fields_csv(fields: list[FormField] | tuple[FormField, ...], output_path: Path) -> None:
    """Write form fields as ``key,value`` rows with a header."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["key", "value"])
        writer.writerows((field.key, field.value) for field in fields)


def process_folder(
    input_dir: Path,
    output_csv: Path,
    verbose: bool = False,
) -> dict[str, int]:
    """Parse all documents in a folder and export their form fields to CSV.

    Each extracted field becomes one row; a document that fails to parse
    contributes a single ``failed`` row carrying the error message.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    processor = DocumentProcessor.from_config(load_config())

    files = _find_documents(input_dir)
    if not files:
        logger.warning("No documents found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d documents to process", len(files))

    rows: list[dict[str, str]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        try:
            document = parse_file(file_path, processor)
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            rows.append({"filename": file_path.name, "status": "failed", "error": str(exc)})
            failed += 1
            continue

        rows.extend(
            {"filename": file_path.name, "status": "success", "key": f.key, "value": f.value}
            for f in document.form_data
        )
        successful += 1

    _write_batch_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _write_batch_csv(rows: list[dict[str, str]], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_BATCH_COLUMNS, restval="")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def run_structuring(command: str, request_path: Path) -> str:
    """Run one structuring stage on a JSON request file.

    Args:
        command: ``"structure"`` or ``"map-schema"``.
        request_path: File holding the request JSON.

    Raises:
        ConfigurationError: If no completion API key is configured.
    """
    client = StructuringClient.from_config(load_config().llm)
    service = StructuringService(client)
    request_text = request_path.read_text()
    try:
        if command == "structure":
            return service.extract_structured_data(request_text)
        return service.map_to_schema(request_text)
    finally:
        client.close()


def _emit(output: str, destination: Path | None) -> None:
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output)
        print(f"Output written to {destination}")
    else:
        print(output)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Document parsing and structuring tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse a single document")
    parse_parser.add_argument("file", type=Path, help="PDF or image to parse")
    parse_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    parse_parser.add_argument("--csv", type=Path, help="Also export form fields to CSV")

    batch_parser = subparsers.add_parser("batch", help="Parse a folder of documents")
    batch_parser.add_argument("input_dir", type=Path, help="Input directory with documents")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    for name, help_text in (
        ("structure", "Extract structured data from a parsed-document request"),
        ("map-schema", "Map extracted data onto a schema"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("request", type=Path, help="JSON request file")
        sub.add_argument("-o", "--output", type=Path, help="Output file")

    args = parser.parse_args(argv)

    setup_logging(load_config().log_level)

    if args.command == "parse":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        processor = DocumentProcessor.from_config(load_config())
        try:
            document = parse_file(args.file, processor)
        except Exception as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        if args.csv:
            write_form_fields_csv(document.form_data, args.csv)
        response = ParsedDocumentResponse.from_document(document)
        _emit(json.dumps(response.model_dump(by_alias=True), indent=2), args.output)
    elif args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.verbose)
    elif args.command in ("structure", "map-schema"):
        if not args.request.exists():
            print(f"Error: {args.request} does not exist", file=sys.stderr)
            sys.exit(1)
        try:
            result = run_structuring(args.command, args.request)
        except ConfigurationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        _emit(result, args.output)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
