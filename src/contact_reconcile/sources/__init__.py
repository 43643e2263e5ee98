from contact_reconcile.sources.spreadsheet import parse_mapping, read_sheet, rows_from_cells

__all__ = ["parse_mapping", "read_sheet", "rows_from_cells"]
