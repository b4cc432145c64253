"""
Report generation for benchmark results.
Supports Markdown, JSON and console output.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from ..config import Config
from .comparison import Comparison
from .runner import ComparisonReport
from .utils import format_kilobytes, get_machine_info, get_report_subdir_name

RULE = "━" * 50


def verdict(comparison: Comparison) -> str:
    """One-line judgement of a comparison's time delta."""
    pct = comparison.time_pct
    if pct > 70:
        return "EXCELLENT! Over 70% improvement!"
    if pct > 50:
        return "GREAT! Over 50% improvement!"
    if pct > 0:
        return "Good improvement"
    if pct < 0:
        return f"Regression: {abs(pct):.1f}% slower than {comparison.baseline.label}"
    return "No measurable difference"


class Reporter:
    """
    Generate benchmark reports in various formats.

    Supports:
        - Markdown reports
        - JSON data export
        - Console output

    Reports are organized by date and host:
        reports/YYYYMMDD_hostname/

    Example:
        reporter = Reporter()
        reporter.generate_markdown(report)
        reporter.generate_json(report)
        reporter.print_summary(report)
    """

    def __init__(self, output_dir: Optional[Path] = None, console: Optional[Console] = None):
        """
        Initialize reporter.

        Args:
            output_dir: Base directory for output files (default: Config.REPORT_DIR)
            console: Rich console for summaries (default: a new stdout console)
        """
        base_dir = output_dir or Config.REPORT_DIR

        self.output_dir = Path(base_dir) / get_report_subdir_name()
        self.console = console or Console()

        # Cache machine info for this reporter instance
        self._machine_info = get_machine_info()

    def _ensure_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def generate_markdown(
        self,
        report: ComparisonReport,
        filename: Optional[str] = None,
    ) -> str:
        """
        Generate a Markdown benchmark report.

        Args:
            report: Benchmark report
            filename: Output filename (optional)

        Returns:
            Path to generated file
        """
        timestamp = report.generated_at.strftime("%Y-%m-%d %H:%M:%S")
        file_timestamp = report.generated_at.strftime("%Y%m%d_%H%M%S")

        if not filename:
            filename = f"benchmark_report_{report.limit}_{file_timestamp}.md"

        output_path = self._ensure_output_dir() / filename
        machine_info = self._machine_info

        lines = []
        lines.append("# Products Performance Test")
        lines.append(f"\n**Dataset size:** {report.limit} products")
        lines.append(f"**Warmup rounds:** {report.warmup_rounds}")
        lines.append(f"**Generated:** {timestamp}")
        lines.append("\n---\n")

        lines.append("## Environment\n")
        lines.append("| Item | Value |")
        lines.append("|------|-------|")
        lines.append(f"| Hostname | {machine_info['hostname']} |")
        lines.append(f"| Platform | {machine_info['platform']} |")
        lines.append(f"| Python | {machine_info['python']} |")
        lines.append(f"| SQLite | {machine_info['sqlite']} |")
        lines.append(f"| SQLAlchemy | {machine_info['sqlalchemy']} |")
        lines.append("\n---\n")

        lines.append(self._format_measurements_section(report))

        if report.baseline_comparisons:
            lines.append(self._format_improvement_section(report.baseline_comparisons))

        if report.comparisons:
            lines.append(self._format_pairs_section(report.comparisons))

        lines.append("\n## Summary\n")
        lines.append(self._generate_summary(report))

        with open(output_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))

        return str(output_path)

    def _format_measurements_section(self, report: ComparisonReport) -> str:
        lines = []
        lines.append("\n## Measurements\n")
        lines.append("| Strategy | Time (ms) | Memory (KB) | Peak (KB) | Queries | Records | Raw rows |")
        lines.append("|----------|-----------|-------------|-----------|---------|---------|----------|")
        for m in report.measurements:
            peak = format_kilobytes(m.peak_memory_bytes) if m.peak_memory_bytes is not None else "-"
            raw = m.raw_row_count if m.raw_row_count is not None else "-"
            lines.append(
                f"| {m.label} | {m.elapsed_ms:.2f} | {format_kilobytes(m.memory_delta_bytes)} "
                f"| {peak} | {m.round_trip_count} | {m.result_count} | {raw} |"
            )
        return "\n".join(lines)

    def _format_improvement_section(self, comparisons: List[Comparison]) -> str:
        lines = []
        lines.append(f"\n## Improvement vs {comparisons[0].baseline.label}\n")
        for comparison in comparisons:
            lines.append(f"### {comparison.reference.label}\n")
            lines.append("```")
            lines.extend(comparison.describe())
            lines.append("```")
            lines.append(f"\n{verdict(comparison)}\n")
        return "\n".join(lines)

    def _format_pairs_section(self, comparisons: List[Comparison]) -> str:
        lines = []
        lines.append("\n## Pairwise Comparison\n")
        lines.append("| Baseline | Reference | Time | Memory | Queries | Row multiplier |")
        lines.append("|----------|-----------|------|--------|---------|----------------|")
        for c in comparisons:
            multiplier = f"x{c.row_multiplier}" if c.row_multiplier is not None else "-"
            lines.append(
                f"| {c.baseline.label} | {c.reference.label} "
                f"| {abs(c.time_pct):.1f}% {c.time_label} "
                f"| {abs(c.memory_pct):.1f}% {c.memory_label} "
                f"| {abs(c.round_trips_saved)} {c.round_trips_label} "
                f"| {multiplier} |"
            )
        return "\n".join(lines)

    def _generate_summary(self, report: ComparisonReport) -> str:
        """Generate summary section."""
        names = {m.strategy: m.label for m in report.measurements}
        summary = report.summary
        lines = []
        if summary.get("fastest"):
            fastest = report.get(summary["fastest"])
            lines.append(f"- **Fastest:** {names[fastest.strategy]} ({fastest.elapsed_ms:.2f}ms)")
        if summary.get("leanest"):
            leanest = report.get(summary["leanest"])
            lines.append(
                f"- **Leanest:** {names[leanest.strategy]} "
                f"({format_kilobytes(leanest.memory_delta_bytes)} KB)"
            )
        if summary.get("fewest_round_trips"):
            cheapest = report.get(summary["fewest_round_trips"])
            lines.append(
                f"- **Fewest queries:** {names[cheapest.strategy]} "
                f"({cheapest.round_trip_count})"
            )
        return "\n".join(lines)

    def generate_json(
        self,
        report: ComparisonReport,
        filename: Optional[str] = None,
    ) -> str:
        """
        Generate JSON benchmark results.

        Args:
            report: Benchmark report to export
            filename: Output filename (optional)

        Returns:
            Path to generated file
        """
        file_timestamp = report.generated_at.strftime("%Y%m%d_%H%M%S")

        if not filename:
            filename = f"benchmark_results_{report.limit}_{file_timestamp}.json"

        output_path = self._ensure_output_dir() / filename

        data = report.to_dict()
        data["exported_at"] = datetime.now().isoformat()
        data["test_environment"] = dict(self._machine_info)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        return str(output_path)

    def print_summary(self, report: ComparisonReport) -> None:
        """Print a summary to console."""
        console = self.console
        console.print(f"\n[bold]{RULE}[/bold]")
        console.print("[green]PRODUCTS PERFORMANCE TEST[/green]")
        console.print(f"[bold]{RULE}[/bold]")
        console.print(f"Dataset size: {report.limit} products")

        table = Table(title="Measurements")
        table.add_column("Strategy", style="cyan")
        table.add_column("Time", justify="right")
        table.add_column("Memory", justify="right")
        table.add_column("Peak", justify="right")
        table.add_column("Queries", justify="right")
        table.add_column("Records", justify="right")
        table.add_column("Raw rows", justify="right")

        for m in report.measurements:
            table.add_row(
                m.label,
                f"{m.elapsed_ms:.2f}ms",
                f"{format_kilobytes(m.memory_delta_bytes)} KB",
                f"{format_kilobytes(m.peak_memory_bytes)} KB" if m.peak_memory_bytes is not None else "-",
                str(m.round_trip_count),
                str(m.result_count),
                str(m.raw_row_count) if m.raw_row_count is not None else "-",
            )

        console.print(table)

        for comparison in report.baseline_comparisons:
            console.print(
                f"\n[green]{comparison.reference.label}[/green] "
                f"vs {comparison.baseline.label}"
            )
            for line in comparison.describe():
                console.print(f"  {line}")
            style = "green" if comparison.time_pct > 0 else "yellow"
            console.print(f"  [{style}]{verdict(comparison)}[/{style}]")

        summary = self._generate_summary(report)
        if summary:
            console.print(f"\n[bold]{RULE}[/bold]")
            console.print(summary.replace("**", ""))
            console.print(f"[bold]{RULE}[/bold]\n")
