"""
Command-line interface for receipt normalization and auditing.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import typer

from receipt_norm.audit import audit_batch
from receipt_norm.normalizer import canonicalize_batch

app = typer.Typer()


def _load_orders(input_path: Path) -> List[Any]:
    """Read orders from a JSON file; a single object is treated as a batch of one."""
    if not input_path.exists():
        typer.echo(f"Error: Input file '{input_path}' does not exist", err=True)
        raise typer.Exit(code=1)

    try:
        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in '{input_path}': {e}", err=True)
        raise typer.Exit(code=1)
    except OSError as e:
        typer.echo(f"Error reading '{input_path}': {e}", err=True)
        raise typer.Exit(code=1)

    if isinstance(data, dict):
        return [data]
    if not isinstance(data, list):
        typer.echo("Error: Input JSON must be an order object or a list of orders", err=True)
        raise typer.Exit(code=1)
    return data


def _write_json(path: Path, payload: Any):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def _print_summary(total: int, consistent: int, flagged: int, note_counts: Dict[str, int]):
    """Print human-readable summary to stdout."""
    typer.echo(f"\n{'='*60}")
    typer.echo("Summary")
    typer.echo(f"{'='*60}")
    typer.echo(f"Total orders: {total}")
    typer.echo(f"Consistent: {consistent}")
    typer.echo(f"Flagged: {flagged}")

    if note_counts:
        typer.echo("\nTop 3 note types:")
        sorted_notes = sorted(note_counts.items(), key=lambda x: x[1], reverse=True)
        for note_type, count in sorted_notes[:3]:
            typer.echo(f"  {note_type}: {count}")
    typer.echo(f"{'='*60}\n")


@app.command()
def canonicalize(
    input: str = typer.Option(..., "--input", help="JSON file with one order or a list of orders"),
    output: str = typer.Option(..., "--output", help="Output JSON file for canonical receipts")
):
    """
    Normalize raw orders into canonical receipts.
    """
    orders = _load_orders(Path(input))
    typer.echo(f"Canonicalizing {len(orders)} order(s)...")

    receipts = canonicalize_batch(orders)
    _write_json(Path(output), [receipt.to_dict() for receipt in receipts])

    line_count = sum(len(receipt.items) for receipt in receipts)
    typer.echo(f"Wrote {len(receipts)} receipt(s) with {line_count} line(s) to: {output}")


@app.command()
def audit(
    input: str = typer.Option(..., "--input", help="JSON file with one order or a list of orders"),
    report: str = typer.Option(..., "--report", help="Output audit report JSON file path")
):
    """
    Report where upstream totals disagree with the normalized receipts.
    """
    orders = _load_orders(Path(input))
    typer.echo(f"Auditing {len(orders)} order(s)...")

    result = audit_batch(orders)
    _write_json(Path(report), result)

    summary = result['summary']
    _print_summary(
        total=summary['total_orders'],
        consistent=summary['consistent_count'],
        flagged=summary['flagged_count'],
        note_counts=summary['note_counts']
    )
    typer.echo(f"Audit report written to: {report}")


@app.command()
def full_run(
    input: str = typer.Option(..., "--input", help="JSON file with one order or a list of orders"),
    output: str = typer.Option(..., "--output", help="Output JSON file for canonical receipts"),
    report: str = typer.Option(..., "--report", help="Output audit report JSON file path")
):
    """
    Canonicalize and audit orders in one operation.
    """
    orders = _load_orders(Path(input))
    if not orders:
        typer.echo("No orders found. Exiting.", err=True)
        raise typer.Exit(code=1)

    receipts = canonicalize_batch(orders)
    _write_json(Path(output), [receipt.to_dict() for receipt in receipts])
    typer.echo(f"Wrote {len(receipts)} receipt(s) to: {output}")

    result = audit_batch(orders)
    _write_json(Path(report), result)

    summary = result['summary']
    _print_summary(
        total=summary['total_orders'],
        consistent=summary['consistent_count'],
        flagged=summary['flagged_count'],
        note_counts=summary['note_counts']
    )
    typer.echo(f"Audit report written to: {report}")


if __name__ == "__main__":
    app()
