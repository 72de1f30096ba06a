"""Import and export of company records (CSV, JSON, JSONL)."""

import csv
import io
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

COLUMNS = [
    "id",
    "rank",
    "name",
    "domain",
    "growth_stage",
    "customer_focus",
    "last_funding_type",
    "last_funding_amount",
    "created_at",
    "description",
]


def format_companies(
    companies: list[dict],
    output_format: str,
    no_headers: bool = False,
) -> str:
    """
    Format company records as text.

    Args:
        companies: Company dicts (see Company.to_dict)
        output_format: "csv", "tsv", "json" or "jsonl"
        no_headers: Omit the header row for CSV/TSV

    Returns:
        Formatted text
    """
    if output_format == "json":
        return json.dumps(companies, indent=2, default=str)

    elif output_format == "jsonl":
        return "\n".join(json.dumps(c, default=str) for c in companies)

    elif output_format in ("csv", "tsv"):
        delimiter = "\t" if output_format == "tsv" else ","
        output = io.StringIO()

        writer = csv.DictWriter(
            output, fieldnames=COLUMNS, delimiter=delimiter, extrasaction="ignore"
        )
        if not no_headers:
            writer.writeheader()

        for company in companies:
            writer.writerow({key: "" if company.get(key) is None else company.get(key) for key in COLUMNS})

        return output.getvalue()

    else:
        raise ValueError(f"Unknown format: {output_format}")


def export_companies(companies: list[dict], output_path: str, output_format: str = "csv") -> str:
    """
    Write company records to a file.

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    output_path.write_text(format_companies(companies, output_format), encoding="utf-8")

    logger.info("Exported %d companies to %s", len(companies), output_path)
    return str(output_path)


def read_companies(input_path: str) -> list[dict]:
    """
    Read company records from a CSV, JSON or JSONL file.

    JSON files may hold a list of objects or an object with a "companies"
    (or "data") list.

    Args:
        input_path: Path to the file; the format is taken from its suffix

    Returns:
        List of record dicts
    """
    path = Path(input_path)
    suffix = path.suffix.lower()

    if suffix in (".csv", ".tsv"):
        delimiter = "\t" if suffix == ".tsv" else ","
        with open(path, newline="", encoding="utf-8") as f:
            return [dict(row) for row in csv.DictReader(f, delimiter=delimiter)]

    if suffix == ".jsonl":
        with open(path, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("companies") or data.get("data") or []
        return list(data)

    raise ValueError(f"Unsupported file type: {path.suffix or path.name}")
