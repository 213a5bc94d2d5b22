"""Command-line interface for the storefront localizer."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import click
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import config
from .errors import LocalizerError
from .models import ReviewItem, TranslationRequest, TranslationResult
from .translation.dynamic_content import DynamicContentTranslator
from .translation.translator import TranslationPipeline

console = Console()
err_console = Console(stderr=True)


class BatchItem(BaseModel):
    """One entry of a batch input file."""
    id: Optional[str] = None
    text: str
    context: Dict[str, Any] = Field(default_factory=dict)


class BatchFile(BaseModel):
    """Batch input wrapped in an object."""
    items: List[BatchItem]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _build_pipeline(data_dir: Union[str, Path]) -> TranslationPipeline:
    return TranslationPipeline.from_config(config, data_dir=data_dir)


def _check_config() -> None:
    errors = config.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise click.Abort()


def _parse_context(pairs: Tuple[str, ...], content_type: Optional[str]) -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--context")
        context[key] = value
    if content_type:
        context["contentType"] = content_type
    return context


def _load_batch(path: str) -> List[BatchItem]:
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--input") from e

    if not isinstance(raw, (dict, list)):
        raise click.BadParameter("expected a list of items or an object with \"items\"", param_hint="--input")
    try:
        if isinstance(raw, dict):
            return BatchFile.model_validate(raw).items
        return [BatchItem.model_validate(item) for item in raw]
    except PydanticValidationError as e:
        raise click.BadParameter(str(e), param_hint="--input") from e


async def _with_pipeline(data_dir: str, action):
    pipeline = _build_pipeline(data_dir)
    try:
        await pipeline.load()
        return await action(pipeline)
    finally:
        await pipeline.aclose()


def _run(data_dir: str, action):
    try:
        return asyncio.run(_with_pipeline(data_dir, action))
    except LocalizerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort() from e


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=lambda: config.data_dir,
    show_default=".localizer",
    help="Directory holding translation memory and review queue files",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=lambda: config.log_level,
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: str, log_level: str):
    """Storefront content localization pipeline."""
    _setup_logging(log_level)
    ctx.obj = {"data_dir": data_dir}


@cli.command()
@click.argument("text")
@click.option("--from", "-f", "from_lang", default=lambda: config.default_source_language,
              help="Source language code")
@click.option("--to", "-t", "to_lang", required=True, help="Target language code")
@click.option("--content-type", help="Content type, e.g. product, marketing, technical")
@click.option("--context", "context_pairs", multiple=True, metavar="KEY=VALUE",
              help="Extra context (tone, formality, ...); repeatable")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_obj
def translate(
    obj: Dict[str, Any],
    text: str,
    from_lang: str,
    to_lang: str,
    content_type: Optional[str],
    context_pairs: Tuple[str, ...],
    as_json: bool,
):
    """Translate a single piece of text."""
    _check_config()
    context = _parse_context(context_pairs, content_type)
    request = TranslationRequest(text=text, from_lang=from_lang, to_lang=to_lang, context=context)

    result = _run(obj["data_dir"], lambda pipeline: pipeline.translate(request))

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return
    _print_result(result)


@cli.command()
@click.option("--input", "-i", "input_path", required=True, type=click.Path(exists=True),
              help="JSON file: a list of {id, text, context} or {\"items\": [...]}")
@click.option("--to", "-t", "to_lang", required=True, help="Target language code")
@click.option("--from", "-f", "from_lang", default=lambda: config.default_source_language,
              help="Source language code")
@click.pass_obj
def batch(obj: Dict[str, Any], input_path: str, to_lang: str, from_lang: str):
    """Translate every entry of a JSON file."""
    _check_config()
    items = _load_batch(input_path)
    requests = [
        TranslationRequest(
            text=item.text,
            from_lang=from_lang,
            to_lang=to_lang,
            context=item.context,
            id=item.id or str(index),
        )
        for index, item in enumerate(items, start=1)
    ]
    console.print(f"[blue]Translating:[/blue] {len(requests)} items to {to_lang}")

    results = _run(obj["data_dir"], lambda pipeline: pipeline.batch_translate(requests))

    table = Table(title=f"Batch results ({from_lang} -> {to_lang})")
    table.add_column("ID", style="dim")
    table.add_column("Translation", max_width=60)
    table.add_column("Provider")
    table.add_column("Score", justify="right")
    table.add_column("Review", justify="center")

    failed = 0
    for item in results:
        if not item.success:
            failed += 1
            table.add_row(item.id or "-", f"[red]{item.error}[/red]", "-", "-", "-")
            continue
        result = item.result
        table.add_row(
            item.id or "-",
            result.translation,
            result.provider,
            _format_score(result.quality_score),
            "[yellow]yes[/yellow]" if result.needs_review else "",
        )

    console.print(table)
    if failed:
        console.print(f"[red]Failed:[/red] {failed}/{len(results)}")


@cli.command()
@click.argument("content")
@click.option("--to", "-t", "to_lang", required=True, help="Target language code")
@click.option("--content-type", required=True,
              help="Dynamic content type, e.g. product_review, comment, marketing_message")
@click.pass_obj
def dynamic(obj: Dict[str, Any], content: str, to_lang: str, content_type: str):
    """Translate user-generated or marketing content."""
    _check_config()

    async def action(pipeline: TranslationPipeline):
        translator = DynamicContentTranslator.from_config(pipeline, config)
        return await translator.translate_dynamic_content(content, to_lang, content_type)

    result = _run(obj["data_dir"], action)
    console.print(result.translation)
    if result.source == "original":
        console.print(f"[yellow]Untranslated ({result.error})[/yellow]")


@cli.group()
def review():
    """Inspect and resolve the human review queue."""
    pass


@review.command("list")
@click.option("--status", type=click.Choice(["pending", "approved", "rejected"]),
              help="Only show items with this status")
@click.pass_obj
def review_list(obj: Dict[str, Any], status: Optional[str]):
    """List review items, most urgent first."""

    async def action(pipeline: TranslationPipeline):
        return pipeline.get_review_queue(status)

    items = _run(obj["data_dir"], action)
    if not items:
        console.print("[green]Review queue is empty[/green]")
        return

    table = Table(title="Review queue")
    table.add_column("ID", style="dim")
    table.add_column("Languages")
    table.add_column("Original", max_width=40)
    table.add_column("Translation", max_width=40)
    table.add_column("Score", justify="right")
    table.add_column("Priority", justify="right")
    table.add_column("Status")

    for item in items:
        table.add_row(
            item.id,
            f"{item.from_lang} -> {item.to_lang}",
            item.original_text,
            item.final_translation or item.translation,
            _format_score(item.quality_score),
            f"{item.priority:.2f}",
            item.status.value,
        )
    console.print(table)


@review.command("approve")
@click.argument("item_id")
@click.option("--translation", "final_translation", help="Corrected translation to store")
@click.option("--notes", help="Reviewer notes")
@click.pass_obj
def review_approve(obj: Dict[str, Any], item_id: str, final_translation: Optional[str],
                   notes: Optional[str]):
    """Approve a review item and write it to translation memory."""
    item = _run(
        obj["data_dir"],
        lambda pipeline: pipeline.resolve_review(item_id, "approve", final_translation, notes),
    )
    _print_review(item)


@review.command("reject")
@click.argument("item_id")
@click.option("--notes", help="Reviewer notes")
@click.pass_obj
def review_reject(obj: Dict[str, Any], item_id: str, notes: Optional[str]):
    """Reject a review item."""
    item = _run(
        obj["data_dir"],
        lambda pipeline: pipeline.resolve_review(item_id, "reject", notes=notes),
    )
    _print_review(item)


@cli.command()
@click.pass_obj
def stats(obj: Dict[str, Any]):
    """Show translation memory, review queue and provider statistics."""

    async def action(pipeline: TranslationPipeline):
        return pipeline.get_statistics()

    data = _run(obj["data_dir"], action)

    table = Table(title="Localizer statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    providers = ", ".join(p["name"] for p in data["providers"]) or "None configured"
    table.add_row("Providers", providers)
    table.add_row("Translation memory entries", str(data["memory_size"]))
    table.add_row("Review items", str(data["review_queue_size"]))
    table.add_row("Pending reviews", str(data["pending_reviews"]))
    table.add_row("Quality threshold", f"{data['quality_threshold']:.2f}")

    console.print(table)


def _format_score(score: Optional[float]) -> str:
    if score is None:
        return "-"
    color = "green" if score >= 0.9 else "yellow" if score >= 0.7 else "red"
    return f"[{color}]{score:.2f}[/{color}]"


def _print_result(result: TranslationResult):
    """Print a single translation with its quality breakdown."""
    lines = [
        f"[bold]{result.translation}[/bold]",
        "",
        f"[dim]Provider:[/dim] {result.provider} ({result.source})",
        f"[dim]Confidence:[/dim] {result.confidence:.2f}",
        f"[dim]Quality score:[/dim] {_format_score(result.quality_score)}",
    ]
    if result.match_type:
        lines.append(f"[dim]Memory match:[/dim] {result.match_type}")
    if result.needs_review:
        lines.append(f"[yellow]Queued for review:[/yellow] {result.review_id}")
    if result.quality and result.quality.recommendations:
        lines.append("")
        lines.extend(f"- {rec}" for rec in result.quality.recommendations)

    console.print(Panel("\n".join(lines), title="Translation"))


def _print_review(item: ReviewItem):
    color = "green" if item.status.value == "approved" else "red"
    console.print(f"[{color}]{item.status.value.capitalize()}:[/{color}] {item.id}")
    if item.final_translation:
        console.print(f"  {item.final_translation}")


if __name__ == "__main__":
    cli()
