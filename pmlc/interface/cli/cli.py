import click
import logging
from pathlib import Path
from pydantic import BaseModel

from pmlc.application.config_loader import load_config
from pmlc.application.config_models import BuildSettings
from pmlc.domain.errors import PmlError, format_chain
from pmlc.domain.models import DocumentResult
from pmlc.interface.cli.output_models import (
    BuildOutput,
    CheckOutput,
    DocumentOutput,
    IssueOutput,
    RenderOutput,
)

logger = logging.getLogger(__name__)


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., RenderOutput.output when inline).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _load_settings(**overrides) -> BuildSettings:
    project_root = Path.cwd()
    cfg = load_config(project_root=project_root, user_home=Path.home())
    return BuildSettings.from_config(cfg, project_root=project_root, overrides=overrides)


def _document_output(result: DocumentResult) -> DocumentOutput:
    return DocumentOutput(
        source=str(result.source),
        output=str(result.output) if result.output else None,
        ok=result.ok,
        error=result.error,
        error_type=result.error_type,
        include_chain=[str(p) for p in result.include_chain],
    )


def _echo_result(result: DocumentResult) -> None:
    if result.ok:
        click.echo(f"OK    {result.source} -> {result.output}")
        return
    click.echo(f"FAIL  {result.source}: {result.error}")
    if len(result.include_chain) > 1:
        click.echo(f"      include chain: {format_chain(result.include_chain)}")


@click.group(help="PML compiler: turns XML prompt definitions into Markdown instructions.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@cli.command("build")
@click.argument("source_dir", required=False, type=click.Path(path_type=Path))
@click.argument("output_dir", required=False, type=click.Path(path_type=Path))
@click.option("--workers", type=int, help="Worker count (default: config, then CPU count).")
@click.option("--extension", "output_extension", type=str, help="Output file extension, e.g. .md or .mdc.")
@click.option("--only", "only", multiple=True, help="Base name to compile (repeatable).")
@click.pass_context
def build_cmd(
    ctx: click.Context,
    source_dir: Path | None,
    output_dir: Path | None,
    workers: int | None,
    output_extension: str | None,
    only: tuple[str, ...],
) -> None:
    try:
        from pmlc.application.build_service import BuildService

        settings = _load_settings(
            source_dir=source_dir,
            output_dir=output_dir,
            workers=workers,
            output_extension=output_extension,
        )

        report = BuildService(settings).build(only=list(only) or None)
        failed = len(report.failures)

        if _get_json_mode(ctx):
            _json_emit(
                BuildOutput(
                    exit_code=report.exit_code,
                    output_dir=str(settings.output_dir),
                    documents=[_document_output(r) for r in report.results],
                    succeeded=report.succeeded,
                    failed=failed,
                )
            )
            raise click.exceptions.Exit(report.exit_code)

        for result in report.results:
            _echo_result(result)
        click.echo(f"\n{report.succeeded} of {len(report.results)} documents compiled.")

        if report.exit_code:
            raise click.exceptions.Exit(report.exit_code)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(BuildOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("render")
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--output", "-o", "output", type=click.Path(path_type=Path), help="Write to FILE instead of stdout.")
@click.pass_context
def render_cmd(ctx: click.Context, source: Path, output: Path | None) -> None:
    try:
        from pmlc.application.transformer import transform
        from pmlc.engine.file_io import write_artifact

        content = transform(source)

        written = None
        if output is not None:
            written = write_artifact(output.parent, output.name, content)

        if _get_json_mode(ctx):
            _json_emit(
                RenderOutput(
                    exit_code=0,
                    source=str(source),
                    output=str(written) if written else None,
                    content=None if written else content,
                )
            )
            raise click.exceptions.Exit(0)

        if written is None:
            click.echo(content, nl=False)
        else:
            click.echo(f"Wrote {written}", err=True)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        chain = e.include_chain if isinstance(e, PmlError) else []
        if _get_json_mode(ctx):
            _json_emit(
                RenderOutput(
                    exit_code=1,
                    source=str(source),
                    error=str(e),
                    include_chain=[str(p) for p in chain],
                )
            )
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("check")
@click.argument("directory", required=False, type=click.Path(path_type=Path))
@click.pass_context
def check_cmd(ctx: click.Context, directory: Path | None) -> None:
    try:
        from pmlc.application.markdown_checker import check_directory

        if directory is None:
            directory = _load_settings().output_dir

        files, issues = check_directory(directory)
        exit_code = 1 if issues else 0

        if _get_json_mode(ctx):
            _json_emit(
                CheckOutput(
                    exit_code=exit_code,
                    files_checked=len(files),
                    issues=[
                        IssueOutput(path=str(i.path), line=i.line, message=i.message)
                        for i in issues
                    ],
                )
            )
            raise click.exceptions.Exit(exit_code)

        for i in issues:
            click.echo(f"{i.path}:{i.line}: {i.message}")
        click.echo(f"\n{len(files)} files checked, {len(issues)} issues found.")

        if exit_code:
            raise click.exceptions.Exit(exit_code)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(CheckOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e
