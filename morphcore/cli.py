"""Command line interface: dictionary coverage validation, tag and confusion lookups."""

from pathlib import Path

import orjson
import typer

from morphcore.config import MorphConfig, load_config
from morphcore.confusion import ConfusionRegistry, load_bundled_confusion_sets, load_confusion_sets
from morphcore.errors import ConfigurationError, MorphCoreError
from morphcore.logging import get_logger, setup_logging
from morphcore.tagging.resolver import TagResolver
from morphcore.tagging.validation import read_dictionary_dump, validate_dictionary

logger = get_logger(__name__)

app: typer.Typer = typer.Typer(
    help="Decode German morphological tags and look up confusable words", no_args_is_help=True
)


def _load_config_or_exit(*, config_path: Path | None) -> MorphConfig:
    try:
        return load_config(config_path=config_path)
    except MorphCoreError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e


@app.callback()
def main(
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output logs in JSON format instead of human-readable format",
    ),
) -> None:
    """Decode German morphological tags and look up confusable words."""
    if json_logs:
        setup_logging(service="cli", json_logs=True)


@app.command()
def validate(
    dictionary: Path | None = typer.Argument(
        None,
        help="Tab-separated dictionary dump (word, lemma, tag); defaults to the configured path",
        show_default=False,
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Path to configuration YAML file",
        show_default=False,
    ),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Stop at the first tag that cannot be decoded",
    ),
    report_path: Path | None = typer.Option(
        None,
        "--report",
        help="Write the validation report as JSON to this path",
        show_default=False,
    ),
) -> None:
    """Check that every tag in a dictionary dump decodes."""
    config = _load_config_or_exit(config_path=config_path)
    dictionary_path = dictionary or config.validation.dictionary_path

    try:
        if dictionary_path is None:
            raise ConfigurationError(
                msg="No dictionary given and validation.dictionary_path is not configured"
            )
        resolver = TagResolver(strict=True)
        report = validate_dictionary(
            resolver=resolver,
            entries=read_dictionary_dump(path=dictionary_path),
            known_problems=config.validation.known_problems,
            fail_fast=fail_fast or config.validation.fail_fast,
        )
    except MorphCoreError as e:
        typer.echo(f"Validation aborted: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(
        f"Checked {report.checked_entries} entries ({report.distinct_tags} distinct tags), "
        f"skipped {len(report.skipped)} known problems"
    )
    for failure in report.failures:
        typer.echo(
            f"FAILED {failure.entry.tag} (word '{failure.entry.word}'): {failure.reason}", err=True
        )

    if report_path is not None:
        report_path.write_text(report.to_json(), encoding="utf-8")
        logger.info(f"Validation report written to {report_path}")

    if not report.ok:
        typer.echo(f"{len(report.failures)} tags could not be decoded", err=True)
        raise typer.Exit(1)
    typer.echo("All tags decoded")


@app.command()
def resolve(
    tags: list[str] = typer.Argument(..., help="Raw tags such as SUB:AKK:SIN:FEM"),
    as_json: bool = typer.Option(False, "--json", help="Print bundles as JSON"),
) -> None:
    """Decode raw tags and print their feature bundles."""
    resolver = TagResolver()
    failed = 0

    for raw_tag in tags:
        result = resolver.try_resolve(raw_tag=raw_tag)
        if result.error is not None:
            failed += 1
            typer.echo(str(result.error), err=True)
            continue
        if as_json:
            payload = {"tag": raw_tag, "bundles": [bundle.to_dict() for bundle in result.bundles]}
            typer.echo(orjson.dumps(payload).decode("utf-8"))
        else:
            for bundle in result.bundles:
                typer.echo(f"{raw_tag}: {bundle.describe()}")

    if failed:
        raise typer.Exit(1)


def _load_registry(*, config: MorphConfig, path: Path | None) -> ConfusionRegistry:
    source = path or config.confusion.path
    if source is not None:
        return load_confusion_sets(
            path=source, warn_on_overwrite=config.confusion.warn_on_overwrite
        )
    return load_bundled_confusion_sets(language=config.confusion.language)


@app.command()
def confusions(
    words: list[str] = typer.Argument(..., help="Words to look up"),
    path: Path | None = typer.Option(
        None,
        "--path",
        help="Confusion-set file; defaults to the bundled resource for the configured language",
        show_default=False,
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Path to configuration YAML file",
        show_default=False,
    ),
) -> None:
    """Print the confusion group of each word."""
    config = _load_config_or_exit(config_path=config_path)
    try:
        registry = _load_registry(config=config, path=path)
    except MorphCoreError as e:
        typer.echo(f"Cannot load confusion sets: {e}", err=True)
        raise typer.Exit(1) from e

    for word in words:
        group = registry.lookup(word)
        if group is None:
            typer.echo(f"{word}: -")
        else:
            typer.echo(f"{word}: {', '.join(group.alternatives_for(word))}")


if __name__ == "__main__":
    app()
