"""Output formatters for analysis reports."""

import csv
import json
from io import StringIO
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from juniper.steps.models import Analysis


class AnalysisTextFormatter:
    """Format analysis reports as Rich tables for terminal display."""

    @staticmethod
    def format(analysis: Analysis, console: Console) -> None:
        """
        Format and print an analysis as Rich tables.

        Creates one table per query listing its clause steps, and one table
        per INSERT with its two count queries.

        Args:
            analysis: Analysis to display
            console: Rich Console instance for output
        """
        if analysis.is_empty:
            console.print("[yellow]No queries or inserts found.[/yellow]")
            return

        for i, query in enumerate(analysis.queries):
            if i > 0:
                console.print()

            table = Table(
                title=f"Query {query.statement_index}: {escape(_preview(query.sql))}",
                title_style="bold",
            )
            table.add_column("Step", style="dim", width=6)
            table.add_column("Clause", style="cyan", width=10)
            table.add_column("CTE", style="green", min_width=6)
            table.add_column("SQL", min_width=30)

            for step in query.steps:
                table.add_row(
                    str(step.step_index),
                    step.clause.value,
                    step.cte_name or "-",
                    Text(step.sql),
                )

            console.print(table)
            if not query.steps:
                console.print(
                    "[dim]No clause steps (not a plain SELECT query)[/dim]"
                )

        for insert in analysis.inserts:
            console.print()
            table = Table(
                title=f"Insert {insert.statement_index}: "
                f"{escape(_preview(insert.insert_statement))}",
                title_style="bold",
            )
            table.add_column("Count", style="cyan", min_width=14)
            table.add_column("SQL", min_width=30)
            table.add_row("Target table", Text(insert.target_table_initial_count))
            table.add_row(
                f"Payload ({insert.payload_kind.value})", Text(insert.payload_count)
            )
            console.print(table)


class AnalysisJsonFormatter:
    """Format analysis reports as JSON."""

    @staticmethod
    def format(analysis: Analysis) -> str:
        """
        Format an analysis as JSON.

        Output format:
        {
          "queries": [
            {
              "statement_index": 0,
              "sql": "SELECT * FROM t1 WHERE x = 1",
              "steps": [
                {
                  "step_index": 0,
                  "clause": "TABLE",
                  "sql": "SELECT COUNT(*) FROM t1",
                  "cte_name": null
                }
              ]
            }
          ],
          "inserts": [
            {
              "statement_index": 1,
              "insert_statement": "INSERT INTO t1 SELECT * FROM t2",
              "target_table": "t1",
              "target_table_initial_count": "SELECT COUNT(*) FROM t1",
              "payload_count": "SELECT COUNT(*) FROM t2",
              "payload_kind": "SELECT"
            }
          ],
          "skipped": []
        }

        Args:
            analysis: Analysis to format

        Returns:
            JSON-formatted string
        """
        return json.dumps(analysis.model_dump(mode="json"), indent=2)


class AnalysisCsvFormatter:
    """Format analysis reports as CSV."""

    @staticmethod
    def format(analysis: Analysis) -> str:
        """
        Format an analysis as CSV.

        Output format:
        statement_index,statement_kind,step_index,clause,cte_name,sql
        0,QUERY,0,TABLE,,SELECT COUNT(*) FROM t1
        1,INSERT,0,TARGET_COUNT,,SELECT COUNT(*) FROM t1

        Args:
            analysis: Analysis to format

        Returns:
            CSV-formatted string
        """
        if analysis.is_empty:
            return ""

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            [
                "statement_index",
                "statement_kind",
                "step_index",
                "clause",
                "cte_name",
                "sql",
            ]
        )

        for query in analysis.queries:
            for step in query.steps:
                writer.writerow(
                    [
                        query.statement_index,
                        "QUERY",
                        step.step_index,
                        step.clause.value,
                        step.cte_name or "",
                        step.sql,
                    ]
                )

        for insert in analysis.inserts:
            writer.writerow(
                [
                    insert.statement_index,
                    "INSERT",
                    0,
                    "TARGET_COUNT",
                    "",
                    insert.target_table_initial_count,
                ]
            )
            writer.writerow(
                [
                    insert.statement_index,
                    "INSERT",
                    1,
                    "PAYLOAD_COUNT",
                    "",
                    insert.payload_count,
                ]
            )

        return output.getvalue()


class AnalysisSqlFormatter:
    """Format analysis reports as a runnable SQL script."""

    @staticmethod
    def format(analysis: Analysis) -> str:
        """
        Format an analysis as a SQL script.

        Each generated query is terminated by a semicolon and preceded by a
        comment naming its statement and clause, so the script can be fed
        directly to a database client.

        Args:
            analysis: Analysis to format

        Returns:
            SQL script
        """
        blocks = []

        for query in analysis.queries:
            for step in query.steps:
                label = (
                    f"query {query.statement_index}, "
                    f"step {step.step_index}: {step.clause.value}"
                )
                if step.cte_name:
                    label += f" (CTE {step.cte_name})"
                blocks.append(f"-- {label}\n{step.sql};")

        for insert in analysis.inserts:
            blocks.append(
                f"-- insert {insert.statement_index}: "
                f"target table {insert.target_table}\n"
                f"{insert.target_table_initial_count};"
            )
            blocks.append(
                f"-- insert {insert.statement_index}: payload\n{insert.payload_count};"
            )

        return "\n\n".join(blocks) + "\n" if blocks else ""


class OutputWriter:
    """Write formatted output to file or stdout."""

    @staticmethod
    def write(content: str, output_file: Optional[Path] = None) -> None:
        """
        Write content to file or stdout.

        Args:
            content: The content to write
            output_file: Optional file path. If None, writes to stdout.
        """
        if output_file:
            output_file.write_text(content, encoding="utf-8")
        else:
            print(content)


def _preview(sql: str, length: int = 60) -> str:
    text = " ".join(sql.split())
    return text[:length] + "..." if len(text) > length else text
