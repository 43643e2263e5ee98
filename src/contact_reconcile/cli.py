from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from contact_reconcile.reporting import DEFAULT_LOCALE, ImportReport, resolve_locale
from contact_reconcile.runners import ReconcileSettings
from contact_reconcile.service import import_spreadsheet
from contact_reconcile.stores import CsvRecordStore


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "import":
        configure_logging(level=getattr(logging, args.log_level))
        report = run_import(
            input_path=args.input,
            mapping=args.mapping,
            store_path=args.store,
            output=args.output,
            locale=args.lang,
            header_rows=args.header_rows,
            strict=args.strict,
            status_field=args.status_field,
            required_fields=args.required_field,
        )
        return 0 if report.status_code == 200 else 1

    parser.print_help()
    return 2


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def run_import(
    *,
    input_path: Path,
    mapping: str,
    store_path: Path,
    output: Path | None,
    locale: str,
    header_rows: int,
    strict: bool,
    status_field: str,
    required_fields: list[str],
) -> ImportReport:
    store = CsvRecordStore(store_path, required_fields=required_fields)
    settings = ReconcileSettings(status_field=status_field, strict_normalization=strict)

    report = import_spreadsheet(
        source=input_path if input_path.exists() else None,
        filename=input_path.name,
        mapping=_load_mapping(mapping),
        store=store,
        locale=resolve_locale(locale),
        header_rows=header_rows,
        settings=settings,
    )
    if report.ok:
        store.save()

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        _write_json(output, {"status": report.status_code, **report.to_dict()})

    print(report.message)
    for failure in report.body.get("failed", []):
        print(f"row {failure['row']}: {failure['error']} ({failure['code']})")
    if output is not None:
        print(f"Report: {output}")
    return report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contact-reconcile", description="Contact spreadsheet import CLI")
    subparsers = parser.add_subparsers(dest="command")

    import_parser = subparsers.add_parser(
        "import",
        help="Reconcile a spreadsheet against the record store and import new contacts",
    )
    import_parser.add_argument("--input", type=Path, required=True, help=".xlsx or .csv file to import")
    import_parser.add_argument(
        "--mapping",
        type=str,
        required=True,
        help='Column index to field mapping, as JSON or a path to a JSON file, e.g. {"0": "name"}',
    )
    import_parser.add_argument("--store", type=Path, default=Path("data/contacts.csv"))
    import_parser.add_argument("--output", type=Path, default=None)
    import_parser.add_argument("--header-rows", type=int, default=0)
    import_parser.add_argument("--lang", type=str, default=DEFAULT_LOCALE)
    import_parser.add_argument("--strict", action="store_true", help="Treat punctuation as whitespace")
    import_parser.add_argument("--status-field", type=str, default="status")
    import_parser.add_argument("--required-field", action="append", default=[])
    import_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )

    return parser


def _load_mapping(value: str) -> str:
    path = Path(value)
    if not value.lstrip().startswith("{") and path.is_file():
        return path.read_text(encoding="utf-8")
    return value


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)


if __name__ == "__main__":
    sys.exit(main())
