from __future__ import annotations

"""Command line for normalizing and fetching RFC 7807 problem details."""

import json
import logging
from typing import IO, List, Tuple

import click
import requests
from tabulate import tabulate

from problemDetails import __version__
from problemDetails.api_clients import ProblemDetailsClient, ProblemDetailsError
from problemDetails.config import ConfigError
from problemDetails.extract import extract
from problemDetails.models import ProblemDetails

_FORMATS = click.Choice(["json", "table"], case_sensitive=False)


def _error_rows(problem: ProblemDetails) -> List[Tuple[str, str]]:
    rows = []
    for line in problem.error_messages():
        name, _, message = line.partition(": ")
        rows.append((name, message))
    return rows


def render(problem: ProblemDetails, fmt: str = "json") -> str:
    """Render ``problem`` as indented JSON or as field/value tables."""
    if fmt.lower() == "json":
        return json.dumps(problem.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)
    fields = problem.to_dict()
    fields.pop("errors", None)
    output = tabulate(sorted(fields.items()), headers=["Field", "Value"])
    errors = _error_rows(problem)
    if errors:
        output = f"{output}\n\n{tabulate(errors, headers=['Field', 'Message'])}"
    return output


@click.group()
@click.version_option(__version__)
def cli() -> None:  # pragma: no cover - simple wrapper
    """problemDetails command line."""


@cli.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--fallback-title", default=None, help="Title used when the payload has none.")
@click.option("--format", "fmt", type=_FORMATS, default="json", show_default=True)
def parse(source: IO[bytes], fallback_title: str | None, fmt: str) -> None:
    """Normalize the JSON payload in SOURCE (stdin by default)."""
    try:
        payload = json.loads(source.read())
    except ValueError as exc:
        raise click.ClickException(f"Malformed JSON: {exc}") from exc
    click.echo(render(extract(payload, fallback_title), fmt))


@cli.command()
@click.argument("url")
@click.option("--method", default="GET", show_default=True, help="HTTP method to use.")
@click.option("--fallback-title", default=None, help="Title used when the response has none.")
@click.option("--format", "fmt", type=_FORMATS, default="json", show_default=True)
@click.pass_context
def fetch(ctx: click.Context, url: str, method: str, fallback_title: str | None, fmt: str) -> None:
    """Request URL and print its problem details when it fails."""
    try:
        client = ProblemDetailsClient(url, fallback_title=fallback_title)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    try:
        client.request(method, "")
    except ProblemDetailsError as exc:
        click.echo(render(exc.problem, fmt))
        ctx.exit(1)
    except requests.RequestException as exc:
        raise click.ClickException(f"Request failed: {exc}") from exc
    finally:
        client.close()
    click.echo(f"ok {url}")


def main() -> None:  # pragma: no cover - console script
    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    cli()


if __name__ == "__main__":  # pragma: no cover - manual usage
    main()
