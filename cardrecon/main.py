import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from cardrecon.config.settings import Settings
from cardrecon.folders.loader import FolderLoader
from cardrecon.logging.logger import Log
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.factory import OcrGatewayFactory
from cardrecon.processor.pipeline import build_reconciliation_pipeline
from cardrecon.redaction.pipeline import build_redaction_pipeline
from cardrecon.redaction.writer import ArchiveContents, RedactionWriter
from cardrecon.sheet.csv_store import load_sheet, validated_path, write_sheet
from cardrecon.sheet.exceptions import SheetError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardrecon",
        description="Reconcile card spreadsheets against OCR results, or redact card images.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Fill actual card numbers into a spreadsheet")
    validate.add_argument("--sheet", type=Path, required=True, help="CSV of expected card records")
    validate.add_argument("--folders", type=Path, required=True, help="Root of customer folders")
    validate.add_argument("--output", type=Path, help="Defaults to <sheet>_validated.csv")

    redact = commands.add_parser("redact", help="Mask card numbers and CVCs on card images")
    redact.add_argument("--folders", type=Path, required=True, help="Root of customer folders")
    redact.add_argument("--output", type=Path, required=True, help="Output directory")
    redact.add_argument("--sheet", type=Path, help="Only redact customers listed in this CSV")
    redact.add_argument("--zip", type=Path, help="Also write the output tree to this zip file")
    redact.add_argument(
        "--zip-contents",
        choices=[contents.value for contents in ArchiveContents],
        default=ArchiveContents.ALL.value,
        help="Which images go into the zip file",
    )
    return parser


def run_validate(args: argparse.Namespace, settings: Settings, gateway: BaseOcrGateway) -> Path:
    sheet = load_sheet(args.sheet)
    folders = FolderLoader().load(args.folders)
    pipeline = build_reconciliation_pipeline(settings, gateway)
    sheet.records = pipeline.run(sheet.records, folders).rows

    output = args.output or validated_path(args.sheet)
    write_sheet(sheet, output)
    return output


def run_redact(args: argparse.Namespace, settings: Settings, gateway: BaseOcrGateway) -> Path:
    folders = FolderLoader().load(args.folders)
    customer_names = None
    if args.sheet is not None:
        customer_names = [record.customer_name for record in load_sheet(args.sheet).records]

    cards = build_redaction_pipeline(settings, gateway).run(folders, customer_names)
    writer = RedactionWriter()
    writer.write(cards, args.output)
    if args.zip is not None:
        writer.archive(cards, args.zip, ArchiveContents(args.zip_contents))
    return args.output


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> build gateway -> run the chosen command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    gateway = OcrGatewayFactory.create(settings)
    try:
        if args.command == "validate":
            output = run_validate(args, settings, gateway)
        else:
            output = run_redact(args, settings, gateway)
    except (FileNotFoundError, SheetError) as exc:
        Log.error(str(exc))
        return 1
    finally:
        gateway.close()

    Log.info(f"Done: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
