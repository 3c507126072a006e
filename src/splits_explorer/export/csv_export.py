import csv
import io
import re
from collections.abc import Sequence
from typing import TextIO

from splits_explorer.domain.columns import Column
from splits_explorer.domain.split_row import SplitGroup, SplitRow, SplitTable
from splits_explorer.domain.tier import StatContext


def _header(columns: Sequence[Column]) -> list[str]:
    return ["Split", *(c.label for c in columns)]


def _record(row: SplitRow, columns: Sequence[Column], context: StatContext) -> list[str]:
    stats = row.stats_for(context)
    return [row.label, *(c.format(getattr(stats, c.key, None)) for c in columns)]


def write_csv(
    columns: Sequence[Column],
    rows: Sequence[SplitRow],
    context: StatContext,
    output: TextIO,
) -> None:
    """Write a flat split view: header, then one line per row in display order."""
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(_header(columns))
    for row in rows:
        writer.writerow(_record(row, columns, context))


def write_grouped_csv(
    columns: Sequence[Column],
    groups: Sequence[SplitGroup],
    context: StatContext,
    output: TextIO,
) -> None:
    """Write a compound view: a ``# <group>`` line before each group's rows and a blank line after."""
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(_header(columns))
    for group in groups:
        output.write(f"# {group.label}\n")
        for row in group.rows:
            writer.writerow(_record(row, columns, context))
        output.write("\n")


def export_csv(columns: Sequence[Column], rows: Sequence[SplitRow], context: StatContext) -> str:
    output = io.StringIO()
    write_csv(columns, rows, context, output)
    return output.getvalue()


def export_grouped_csv(columns: Sequence[Column], groups: Sequence[SplitGroup], context: StatContext) -> str:
    output = io.StringIO()
    write_grouped_csv(columns, groups, context, output)
    return output.getvalue()


def export_table(table: SplitTable, columns: Sequence[Column]) -> str:
    if table.grouped:
        return export_grouped_csv(columns, table.groups, table.context)
    return export_csv(columns, table.rows, table.context)


def export_filename(title: str) -> str:
    stem = re.sub(r"\s+", "_", title.strip()).lower()
    return f"{stem}_splits.csv"
