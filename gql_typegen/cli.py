"""Command-line interface for gql-typegen."""

import importlib
import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click
from graphql import GraphQLError

from .core.errors import GenerationError
from .core.generator import CodeGenerator
from .core.hooks import AddHeaderHook, HookRunner
from .core.parser import SchemaParser, load_query_declarations
from .core.scalars import ScalarRegistry

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    if archive_path.suffix == ".zip":
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            zip_ref.extractall(temp_dir)
    elif archive_path.name.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive_path, "r:gz") as tar_ref:
            tar_ref.extractall(temp_dir, filter="data")
    else:
        shutil.rmtree(temp_dir)
        raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
    return temp_dir


def load_handler(reference: str) -> type:
    """Import a handler class from a ``module:Class`` reference."""
    module_path, _, attribute = reference.partition(":")
    if not module_path or not attribute:
        raise ValueError(f"expected module:Class, got {reference!r}")
    handler = importlib.import_module(module_path)
    for part in attribute.split("."):
        handler = getattr(handler, part)
    return handler


def parse_scalars(_ctx, _param, values: tuple[str, ...]) -> dict[str, type]:
    """Click callback turning ``NAME=module:Class`` options into handlers."""
    handlers = {}
    for value in values:
        name, sep, reference = value.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=module:Class, got {value!r}")
        try:
            handlers[name] = load_handler(reference)
        except (ImportError, AttributeError, ValueError) as e:
            raise click.BadParameter(f"cannot load handler for {name}: {e}") from e
    return handlers


@click.group()
@click.version_option(package_name="gql-typegen")
def main():
    """Typed Python result classes from GraphQL queries.

    Generate accessor classes for the operations in GraphQL query documents.
    """
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, introspection JSON or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--queries",
    "-q",
    required=True,
    multiple=True,
    type=click.Path(exists=True),
    help="Query document file or directory (repeatable).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    help="Output module, or package directory with --split. Prints to stdout if omitted.",
)
@click.option(
    "--split",
    is_flag=True,
    help="Write one module per class plus an __init__.py.",
)
@click.option(
    "--scalar",
    "scalars",
    multiple=True,
    callback=parse_scalars,
    metavar="NAME=module:Class",
    help="Handler class for a custom scalar (repeatable).",
)
@click.option(
    "--header",
    help="Header text added to the top of every generated file.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory with Jinja2 templates overriding the built-in ones.",
)
@click.option(
    "--no-validate",
    is_flag=True,
    help="Skip validating query documents against the schema.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str,
    queries: tuple[str, ...],
    output: str | None,
    split: bool,
    scalars: dict[str, type],
    header: str | None,
    template_dir: str | None,
    no_validate: bool,
    verbose: bool,
):
    """Generate typed result classes from GraphQL query documents.

    Examples:

        gql-typegen generate --schema ./schema --queries ./queries --output ./queries.py

        gql-typegen generate -s ./schema.graphql -q ./queries -o ./generated --split

        gql-typegen generate -s ./schema.json -q ./get_user.graphql --scalar Money=myapp.scalars:MoneyHandler
    """
    if verbose:
        logging.getLogger("gql_typegen").setLevel(logging.DEBUG)
    if split and not output:
        raise click.UsageError("--split requires --output")

    schema_path = Path(schema).resolve()
    temp_dir = None

    try:
        # Handle archives
        actual_schema_path = schema_path
        if schema_path.is_file() and schema_path.name.lower().endswith(ARCHIVE_SUFFIXES):
            click.echo(f"Extracting archive {schema_path.name}...", err=True)
            temp_dir = extract_archive(schema_path)
            actual_schema_path = Path(temp_dir)
            if verbose:
                click.echo(f"  Extracted to: {temp_dir}", err=True)

        # Parse schema
        click.echo("Parsing schema...", err=True)
        graphql_schema = SchemaParser(str(actual_schema_path)).parse_all()

        registry = ScalarRegistry()
        for name, handler in scalars.items():
            registry.register(name, handler)

        hooks = HookRunner()
        if header:
            hooks.add_post_hook(AddHeaderHook(header))

        generator = CodeGenerator(
            graphql_schema,
            scalars=registry,
            template_dir=template_dir,
            validate_documents=not no_validate,
            hooks=hooks,
        )

        # Generate code
        click.echo("Generating code...", err=True)
        declarations = [d for path in queries for d in load_query_declarations(path)]
        for declaration in declarations:
            if verbose:
                click.echo(f"  {declaration.source}", err=True)
            generator.generate(declaration)

        if verbose:
            click.echo(f"  Documents: {len(declarations)}", err=True)
            click.echo(f"  Classes: {len(generator.classes)}", err=True)

        if output is None:
            click.echo(hooks.run_post_hooks("<stdout>", generator.contents()), nl=False)
            return

        output_path = Path(output).resolve()
        written = generator.write(str(output_path), split=split)
        click.echo(f"Done! Generated {len(written)} file(s) in {output_path}", err=True)
    except (GenerationError, GraphQLError) as e:
        raise click.ClickException(str(e)) from e
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)


if __name__ == "__main__":
    main()
