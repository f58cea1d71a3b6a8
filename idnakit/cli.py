import click
from typing import List, Optional, Tuple
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
import logging
from pathlib import Path

from idnakit import __version__
from idnakit.core.config import OPTION_NAMES, PROFILES, IDNAOptions, get_profile, load_options
from idnakit.core.errors import IDNAError
from idnakit.core.table import Deviation, Mapped, Valid, default_table
from idnakit.core.utils import parse_codepoint, parse_comma_separated
from idnakit.modules.domain import DomainProcessor
from idnakit.modules.status import DomainResult

console = Console()
logger = logging.getLogger("idnakit")


def setup_logging(verbose: bool) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def resolve_options(
    profile: str,
    config: Optional[str],
    transitional: bool,
    std3: Optional[bool]
) -> IDNAOptions:
    """Profile first, then the YAML config file, then command line flags"""
    try:
        options = load_options(config) if config else get_profile(profile)
        if transitional:
            options = options.replace(transitional=True)
        if std3 is not None:
            options = options.replace(use_std3=std3)
    except IDNAError as e:
        raise click.BadParameter(str(e))
    return options


def processing_options(func):
    """Options shared by to-ascii and to-unicode"""
    decorators = [
        click.argument('domains', nargs=-1, required=True),
        click.option(
            '--profile', '-p',
            type=click.Choice(list(PROFILES)),
            default='default',
            show_default=True,
            help='Named option profile'
        ),
        click.option(
            '--config', '-c',
            type=click.Path(exists=True, dir_okay=False),
            help='YAML file with IDNA options (overrides --profile)'
        ),
        click.option('--transitional', is_flag=True, help='Map deviation characters (ß, ς, ZWJ, ZWNJ)'),
        click.option('--std3/--no-std3', default=None, help='Apply STD3 ASCII rules'),
        click.option(
            '--output', '-o',
            type=click.Path(),
            help='Output file to save results'
        ),
        click.option('--verbose', '-v', is_flag=True, help='Debug logging'),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def print_results(results: List[Tuple[str, DomainResult]]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Input", style="cyan", no_wrap=True)
    table.add_column("Result", style="yellow", no_wrap=True)
    table.add_column("Status")
    table.add_column("OK", justify="center")

    for source, result in results:
        status = ", ".join(result.tokens) or "-"
        ok = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        table.add_row(source, result.result, status, ok)

    console.print(table)


def save_results(output: str, results: List[Tuple[str, DomainResult]]) -> None:
    try:
        with open(Path(output), 'w', encoding='utf-8') as f:
            for source, result in results:
                f.write(f"{source}\t{result.result}\n")
        console.print(f"[green]✓ Saved to {output}[/green]")
    except OSError as e:
        console.print(f"[red]Error saving: {e}[/red]")
        raise click.Abort()


def convert(
    domains: Tuple[str, ...],
    to_ascii: bool,
    profile: str,
    config: Optional[str],
    transitional: bool,
    std3: Optional[bool],
    output: Optional[str],
    verbose: bool
) -> None:
    setup_logging(verbose)
    options = resolve_options(profile, config, transitional, std3)
    processor = DomainProcessor(default_table(), options)

    enabled = [name for name, value in options.as_dict().items() if value]
    console.print(Panel.fit(
        f"[bold cyan]idnakit[/bold cyan] {'ToASCII' if to_ascii else 'ToUnicode'}\n\n"
        f"[yellow]Profile:[/yellow] {config or profile}\n"
        f"[yellow]Options:[/yellow] {', '.join(enabled) or 'none'}",
        border_style="cyan"
    ))

    results = []
    for domain in domains:
        result = processor.to_ascii(domain) if to_ascii else processor.to_unicode(domain)
        results.append((domain, result))

    print_results(results)
    if output:
        save_results(output, results)

    failed = [source for source, result in results if not result.success]
    if failed:
        console.print(f"[red]Failed: {', '.join(failed)}[/red]")
        raise SystemExit(1)


@click.command(name='to-ascii')
@processing_options
def to_ascii_command(domains, profile, config, transitional, std3, output, verbose):
    """
    Convert domain names to their ASCII (punycode) form.

    Examples:

      idnakit to-ascii Bücher.example
      idnakit to-ascii faß.de --transitional
      idnakit to-ascii -p strict -o out.tsv 例え.テスト münchen.de

    Put -- before a domain that starts with a hyphen:

      idnakit to-ascii -- -abc.com
    """
    convert(domains, True, profile, config, transitional, std3, output, verbose)


@click.command(name='to-unicode')
@processing_options
def to_unicode_command(domains, profile, config, transitional, std3, output, verbose):
    """
    Convert domain names to their Unicode form.

    Examples:

      idnakit to-unicode xn--bcher-kva.example
      idnakit to-unicode -c idna.yaml xn--fa-hia.de
    """
    convert(domains, False, profile, config, transitional, std3, output, verbose)


@click.command(name='classify')
@click.argument('codepoints', nargs=-1, required=True)
def classify_command(codepoints):
    """
    Show the mapping table entry for code points.

    Each argument is a comma-separated list of U+XXXX, 0xXXXX, hex values
    or single characters.

    Examples:

      idnakit classify U+00DF
      idnakit classify ß,ς,0x200D
    """
    table = default_table()

    values = [item for arg in codepoints for item in parse_comma_separated(arg)]
    try:
        cps = [parse_codepoint(value) for value in values]
    except ValueError as e:
        raise click.BadParameter(str(e))

    console.print(f"[bold cyan]IDNA mapping table {table.version}[/bold cyan]\n")
    result_table = Table(show_header=True, header_style="bold magenta")
    result_table.add_column("Code point", style="cyan")
    result_table.add_column("Status", style="yellow")
    result_table.add_column("Mapping")
    result_table.add_column("IDNA2008")

    for cp in cps:
        entry = table.classify(cp)
        mapping = ""
        if isinstance(entry, (Mapped, Deviation)):
            mapping = " ".join(f"U+{ord(c):04X}" for c in entry.replacement) or "(removed)"
        idna2008 = entry.status.value if isinstance(entry, Valid) and entry.status else ""
        result_table.add_row(f"U+{cp:04X}", entry.kind.value, mapping, idna2008)

    console.print(result_table)


@click.command()
def profiles():
    """List all available option profiles"""
    console.print("[bold cyan]Available Profiles[/bold cyan]\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Profile", style="cyan", no_wrap=True)
    for name in OPTION_NAMES:
        table.add_column(name.replace('_', ' '), justify="center")

    for name, options in PROFILES.items():
        flags = ["[green]✓[/green]" if value else "[dim]-[/dim]" for value in options.as_dict().values()]
        table.add_row(name, *flags)

    console.print(table)


# Group commands
@click.group()
@click.version_option(version=__version__, prog_name='idnakit')
def main():
    """idnakit - UTS #46 / IDNA2008 domain name conversion"""
    pass


main.add_command(to_ascii_command)
main.add_command(to_unicode_command)
main.add_command(classify_command)
main.add_command(profiles)


if __name__ == '__main__':
    main()
