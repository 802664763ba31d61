"""
elfsize CLI -- ELF Logical Content Size
========================================

Click-based command-line interface around
:class:`~elfsize.core.engine.ElfSizeCalculator`.

Usage::

    # Print the size in bytes
    elfsize /path/to/binary

    # Full result as JSON
    elfsize /path/to/binary --json

    # Table of every intermediate value
    elfsize /path/to/binary --details

    # Debug logging on stderr
    elfsize /path/to/binary --verbose

Exit status is 0 on success and 1 on any failure, including a wrong
number of arguments.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import click

from shared.config import AppConfig
from shared.console import ToolConsole
from shared.logger import ElfSizeLogger

from elfsize import __version__
from elfsize.core.engine import ElfSizeCalculator
from elfsize.core.errors import ElfSizeError
from elfsize.output.console import ElfSizeConsoleOutput
from elfsize.output.report import ElfSizeReportGenerator


EXIT_FAILURE = 1


# ---------------------------------------------------------------------------
# CLI command
# ---------------------------------------------------------------------------

@click.command("elfsize", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("paths", nargs=-1, metavar="FILE")
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the full result as JSON instead of the bare size.",
)
@click.option(
    "--details", "-d",
    is_flag=True,
    default=False,
    help="Print a table of every value used to compute the size.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a JSON report to this path.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="TOML configuration file.  Default: config.toml in the project root.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging on stderr.",
)
@click.version_option(__version__, "-V", "--version", prog_name="elfsize")
@click.pass_context
def elfsize_cli(
    ctx: click.Context,
    paths: tuple[str, ...],
    json_output: bool,
    details: bool,
    output_path: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Print where the ELF content of FILE ends, in bytes.

    The size is the larger of the section header table end and the end
    of the last section's content.  Data appended after it is not
    counted.

    Examples:

    \b
        elfsize /usr/bin/ls
        elfsize firmware.signed.elf --details
    """
    console = ToolConsole()

    if len(paths) != 1:
        console.usage(ctx.get_usage())
        ctx.exit(EXIT_FAILURE)
    path = paths[0]

    if json_output and details:
        console.error("Cannot use --json and --details together.")
        ctx.exit(EXIT_FAILURE)

    try:
        config = AppConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Invalid configuration: {exc}")
        ctx.exit(EXIT_FAILURE)

    settings = config.global_settings
    logger = ElfSizeLogger(
        "cli",
        log_level="DEBUG" if verbose or settings.debug else settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
        console_output=True,
    )
    try:
        _run(ctx, console, logger, config, path, json_output, details, output_path)
    finally:
        logger.close()


def _run(
    ctx: click.Context,
    console: ToolConsole,
    logger: ElfSizeLogger,
    config: AppConfig,
    path: str,
    json_output: bool,
    details: bool,
    output_path: str | None,
) -> None:
    calculator = ElfSizeCalculator(config=config, logger=logger)

    try:
        result = calculator.analyze(path)
    except ElfSizeError:
        console.error(f"unable to get ELF size for file '{path}'")
        ctx.exit(EXIT_FAILURE)

    output_format = config.elfsize.output_format
    if json_output:
        output_format = "json"
    elif details:
        output_format = "table"

    report_gen = ElfSizeReportGenerator()
    if output_format == "json":
        console.result(report_gen.render_json(result))
    elif output_format == "table":
        ElfSizeConsoleOutput(console=console).display(result)
    else:
        console.result(str(result.content_size))

    if result.is_truncated:
        console.warning(
            f"headers describe {result.content_size} bytes but "
            f"'{path}' holds only {result.file_size}"
        )
    elif config.elfsize.warn_on_trailing_data and result.trailing_bytes:
        console.warning(
            f"'{path}' carries {result.trailing_bytes} bytes past the ELF content"
        )

    if output_path:
        try:
            report_path = report_gen.generate_json(result, output_path)
        except OSError as exc:
            console.error(f"Cannot write report: {exc}")
            ctx.exit(EXIT_FAILURE)
        logger.info("JSON report saved: %s", report_path)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfsize`` console script and ``python -m elfsize``."""
    elfsize_cli()


if __name__ == "__main__":
    main()
