"""
Command-line interface for gogen.

Parses a Go source file, renders it through a template and writes the
result to a file or standard output. Diagnostics go to standard error.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .core.config import ConfigError, Configuration
from .core.generator import GeneratorError, TemplateGenerator
from .core.model import CompilationUnit
from .core.templates import BUILTIN_PREFIX, TemplateError, list_builtin_templates
from .languages.go.extractor import ExtractorError, get_extractor
from .logging_config import configure_logging, get_logger
from .utils import SourceLoadError, parse_comma_separated

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Diagnostics and tables; generated code goes to stdout untouched
console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gogen",
        description="Go type code generator: parses Go source files and "
        "generates code using templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate TypeScript types
  gogen -i models.go -t typescript.ts.j2 -o models.ts

  # Use a built-in template
  gogen -i models.go -t builtin:valibot -o schemas.ts

  # Generate for specific structs only
  gogen -i models.go -t builtin:typescript -T User,Product

  # Exclude specific types
  gogen -i models.go -t builtin:typescript -X InternalConfig,PrivateData

  # Custom type mappings
  gogen -i models.go -t builtin:valibot -c config.yaml -o schemas.ts
        """.strip(),
    )

    io_group = parser.add_argument_group("input and output")
    io_group.add_argument(
        "-i", "--input", metavar="FILE", help="Input Go source file or URL (required)"
    )
    io_group.add_argument(
        "-t",
        "--template",
        metavar="TEMPLATE",
        help=f"Template file, URL or {BUILTIN_PREFIX}NAME (required)",
    )
    io_group.add_argument(
        "-o", "--output", metavar="FILE", help="Output file (default: stdout)"
    )
    io_group.add_argument(
        "-c", "--config", metavar="FILE", help="Config file (YAML/JSON)"
    )

    gen_group = parser.add_argument_group("generation options")
    gen_group.add_argument(
        "--per-type",
        action="store_true",
        help="Execute template once per type",
    )
    gen_group.add_argument(
        "--exported",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only process exported types (default: on)",
    )
    gen_group.add_argument(
        "--tag", metavar="KEY", help="Tag key for field names (default: json)"
    )
    gen_group.add_argument(
        "-T",
        "--types",
        metavar="NAMES",
        help="Only generate for these types (comma-separated)",
    )
    gen_group.add_argument(
        "-X", "--exclude", metavar="NAMES", help="Exclude these types (comma-separated)"
    )

    misc_group = parser.add_argument_group("miscellaneous")
    misc_group.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )
    misc_group.add_argument(
        "--log-file", metavar="FILE", type=Path, help="Also write logs to FILE"
    )
    misc_group.add_argument(
        "--list-templates",
        action="store_true",
        help="List built-in templates and exit",
    )
    misc_group.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> Configuration:
    """Build the frozen configuration from defaults, config file and flags."""
    config = Configuration()

    if args.config:
        config.load_file(args.config)

    config.apply_options(
        per_type=args.per_type,
        exported_only=args.exported,
        tag_key=args.tag,
        include_types=parse_comma_separated(args.types),
        exclude_types=parse_comma_separated(args.exclude),
    )

    for warning in config.validate():
        logger.warning(warning)

    return config.freeze()


def run(args: argparse.Namespace) -> int:
    """Run generation for parsed arguments."""
    if not args.input:
        raise CLIError("input file is required (-i or --input)")
    if not args.template:
        raise CLIError("template file is required (-t or --template)")

    config = build_config(args)

    unit = get_extractor().parse_file(args.input)
    if args.verbose:
        _show_types(unit)

    generator = TemplateGenerator(config)
    generator.load_template(args.template)

    for warning in generator.validate(unit):
        logger.warning(warning)

    if args.output:
        generator.write(unit, args.output)
        if args.verbose:
            console.print(f"[green]✓[/green] Generated output to {escape(args.output)}")
    else:
        generator.generate(unit, sys.stdout)

    return 0


def _show_types(unit: CompilationUnit):
    """Print the parsed declarations as a table."""
    table = Table(
        title=f"Parsed {len(unit.declarations)} types from {escape(unit.path)}",
        box=box.ROUNDED,
        title_style="bold cyan",
    )
    table.add_column("Type", style="bold green", no_wrap=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Fields", justify="right")
    table.add_column("Exported", style="blue")

    for declaration in unit.declarations:
        fields = str(len(declaration.fields)) if declaration.fields else "-"
        table.add_row(
            declaration.name,
            str(declaration.kind),
            fields,
            "yes" if declaration.is_exported else "no",
        )

    console.print(table)


def _list_templates() -> int:
    """List built-in templates."""
    names = list_builtin_templates()
    if not names:
        console.print("[yellow]⚠️ No built-in templates available[/yellow]")
        return 0

    table = Table(
        title="📋 Built-in Templates", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Name", style="bold green", no_wrap=True)
    table.add_column("Usage", style="cyan")

    for name in names:
        table.add_row(name, f"-t {BUILTIN_PREFIX}{name}")

    console.print(table)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the gogen command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, log_file=args.log_file)

    if args.list_templates:
        return _list_templates()

    try:
        return run(args)
    except (
        CLIError,
        SourceLoadError,
        ExtractorError,
        ConfigError,
        TemplateError,
        GeneratorError,
    ) as e:
        logger.debug("Generation failed", exc_info=True)
        message = " ".join(line.strip() for line in str(e).splitlines())
        console.print(
            f"[red]✗ Error:[/red] {escape(message)}", soft_wrap=True, highlight=False
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
