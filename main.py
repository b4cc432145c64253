#!/usr/bin/env python3
"""
Aggregated Query Benchmark - CLI Entry Point

Usage:
    python main.py seed --products 10000
    python main.py run --limit 500 --warmup 1
    python main.py check --limit 100
    python main.py list-strategies
"""

import sys
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from querybench import __version__
from querybench.config import Config
from querybench.store import FixtureGenerator, Store
from querybench.strategies import STRATEGIES
from querybench.benchmark.runner import BenchmarkAbortedError, BenchmarkRunner
from querybench.benchmark.reporter import Reporter

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure root logger
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

    # Also set level for our modules
    for module in ['querybench.store', 'querybench.strategies', 'querybench.benchmark', 'querybench.data']:
        logging.getLogger(module).setLevel(level)


def _open_store(ctx) -> Store:
    try:
        return Store(ctx.obj['database_url'])
    except Exception as e:
        console.print(f"[red]Error opening database: {e}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output (INFO level)')
@click.option('--debug', is_flag=True, help='Enable debug output (DEBUG level)')
@click.option('--database-url', default=None, help='SQLAlchemy database URL (default: QB_DATABASE_URL)')
@click.pass_context
def cli(ctx, verbose, debug, database_url):
    """
    Aggregated Query Benchmark Tool

    Loads the same products (with category, brand, images, reviews and
    counts) through several query strategies and compares time, memory and
    number of queries.

    Use -v for verbose output, --debug for detailed logs.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['debug'] = debug
    ctx.obj['database_url'] = database_url or Config.DATABASE_URL
    setup_logging(verbose, debug)


@cli.command()
@click.option('--limit', '-l', default=Config.DEFAULT_LIMIT, type=int, show_default=True,
              help=f'Number of products to load (clamped to 1..{Config.MAX_LIMIT})')
@click.option('--warmup', '-w', default=Config.DEFAULT_WARMUP, type=int, show_default=True,
              help='Unmeasured warmup passes before measuring')
@click.option('--output', '-o', default=None, help='Output report filename')
@click.option('--format', '-f', 'fmt', type=click.Choice(['md', 'json', 'both', 'none']),
              default='none', show_default=True, help='Report files to write')
@click.pass_context
def run(ctx, limit, warmup, output, fmt):
    """
    Measure every strategy and compare them.

    Example:
        python main.py run -l 500 -w 1 -f both
    """
    store = _open_store(ctx)
    try:
        product_count = store.product_count()
    except Exception as e:
        console.print(f"[red]Error reading products: {e}[/red]")
        console.print("Run: python main.py seed")
        store.dispose()
        sys.exit(1)

    if product_count == 0:
        console.print("[red]Error: the database holds no products.[/red]")
        console.print("Run: python main.py seed")
        store.dispose()
        sys.exit(1)

    clamped = Config.clamp_limit(limit)
    console.print("\n[bold blue]Aggregated Query Benchmark[/bold blue]")
    console.print(f"Database: [cyan]{store.engine.url}[/cyan]")
    console.print(f"Limit: [cyan]{clamped}[/cyan]")
    console.print(f"Warmup: [cyan]{max(0, warmup)}[/cyan]")
    console.print("")

    runner = BenchmarkRunner(store)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Running benchmark...", total=None)
        runner.on_progress(
            lambda stage, strategy: progress.update(
                task, description=f"{stage}: {strategy.display_name}"
            )
        )

        try:
            report = runner.run(limit=limit, warmup_rounds=warmup)
        except BenchmarkAbortedError as e:
            progress.stop()
            console.print(f"[red]Benchmark aborted: {e}[/red]")
            store.dispose()
            sys.exit(1)

        progress.update(task, completed=True)

    store.dispose()

    reporter = Reporter(console=console)
    report.metadata = {"database_url": str(store.engine.url)}

    if fmt in ['md', 'both']:
        md_path = reporter.generate_markdown(report, output)
        console.print(f"📄 Markdown report: [green]{md_path}[/green]")

    if fmt in ['json', 'both']:
        json_path = reporter.generate_json(report)
        console.print(f"📊 JSON results: [green]{json_path}[/green]")

    # Print summary
    reporter.print_summary(report)


@cli.command()
@click.option('--limit', '-l', default=100, type=int, show_default=True, help='Number of products to compare')
@click.pass_context
def check(ctx, limit):
    """
    Verify that every strategy loads identical products.

    Example:
        python main.py check -l 100
    """
    store = _open_store(ctx)
    console.print("\n[bold blue]Strategy Consistency Check[/bold blue]")
    console.print(f"Limit: [cyan]{Config.clamp_limit(limit)}[/cyan]\n")

    try:
        mismatched = BenchmarkRunner(store).verify(limit)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    finally:
        store.dispose()

    if mismatched:
        console.print(f"[red]❌ Output differs for: {', '.join(mismatched)}[/red]")
        sys.exit(1)

    console.print("[green]✅ All strategies return the same products.[/green]")


@cli.command()
@click.option('--products', '-n', default=Config.PRODUCTS_COUNT, type=int, show_default=True, help='Number of products')
@click.option('--categories', default=Config.CATEGORIES_COUNT, type=int, show_default=True, help='Number of categories')
@click.option('--brands', default=Config.BRANDS_COUNT, type=int, show_default=True, help='Number of brands')
@click.option('--images', default=Config.IMAGES_PER_PRODUCT, type=int, show_default=True, help='Images per product')
@click.option('--reviews', default=Config.REVIEWS_PER_PRODUCT, type=int, show_default=True, help='Reviews per product')
@click.option('--seed', 'seed_value', default=None, type=int, help='Random seed for reproducible data')
@click.option('--reset/--no-reset', default=True, help='Drop existing tables first')
@click.pass_context
def seed(ctx, products, categories, brands, images, reviews, seed_value, reset):
    """
    Generate fixture data.

    Example:
        python main.py seed -n 10000 --seed 42
    """
    Config.ensure_directories()
    store = _open_store(ctx)

    console.print("\n[bold blue]Starting fixtures generation...[/bold blue]")
    console.print(f"Database: [cyan]{store.engine.url}[/cyan]\n")

    try:
        generator = FixtureGenerator(
            store,
            categories=categories,
            brands=brands,
            products=products,
            images_per_product=images,
            reviews_per_product=reviews,
            batch_size=Config.FIXTURE_BATCH_SIZE,
            seed=seed_value,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        tasks = {}

        def _advance(stage, completed, total):
            if stage not in tasks:
                tasks[stage] = progress.add_task(f"Creating {stage}", total=total)
            progress.update(tasks[stage], completed=completed)

        generator.on_progress(_advance)
        summary = generator.load(reset=reset)

    store.dispose()

    table = Table(title="Fixtures")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in summary.to_dict().items():
        table.add_row(name, str(count))
    console.print(table)
    console.print("\n[green]Fixtures loaded successfully![/green]")


@cli.command('list-strategies')
def list_strategies_cmd():
    """List available strategies in execution order."""
    console.print("\n[bold]Available Strategies:[/bold]\n")

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display Name")
    table.add_column("Returns")
    table.add_column("Description")

    for position, (name, strategy_class) in enumerate(STRATEGIES.items(), start=1):
        table.add_row(
            str(position),
            name,
            strategy_class.display_name,
            strategy_class.return_kind.value,
            strategy_class.description,
        )

    console.print(table)
    console.print("\nThe first strategy is the baseline of every comparison.")


@cli.command('init')
def init():
    """Initialize a new benchmark project."""
    console.print("\n[bold blue]Initializing Benchmark Project[/bold blue]\n")

    # Create directories
    Config.ensure_directories()
    console.print(f"✅ Created output directory: {Config.OUTPUT_DIR}")
    console.print(f"✅ Created reports directory: {Config.REPORT_DIR}")

    # Check .env
    env_file = Path(".env")
    if not env_file.exists():
        console.print("\n[yellow]⚠️  No .env file found.[/yellow]")
        console.print("Defaults are used; set QB_DATABASE_URL in .env to point elsewhere.")
    else:
        console.print("✅ .env file exists")

    console.print("\n[bold]Next steps:[/bold]")
    console.print("1. Generate data: python main.py seed")
    console.print("2. Check strategies agree: python main.py check")
    console.print("3. Run: python main.py run -l 500")


if __name__ == "__main__":
    cli()
