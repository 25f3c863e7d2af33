"""helpgen CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from helpgen.errors import CompileError, RenderError
from helpgen.parser.help_parser import compile_help
from helpgen.renderer.html_renderer import HTMLRenderer
from helpgen.renderer.images import ImageCache
from helpgen.renderer.rtf_renderer import RTFRenderer

EXIT_READ_ERROR = 1
EXIT_COMPILE_ERROR = 2
EXIT_RENDER_ERROR = 3


class HelpgenFailure(click.ClickException):
    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("input_path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--html", "output_format", flag_value="html", default=True, help="Generate HTML (default)")
@click.option("--rtf", "output_format", flag_value="rtf", help="Generate RTF")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Output path (default: stdout)")
@click.option(
    "--image-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    envvar="HELPGEN_IMAGE_DIR",
    help="Directory searched recursively for referenced images",
)
@click.option("--verbose", "-v", is_flag=True, help="Log compiler progress to stderr")
def main(
    input_path: Path | None,
    output_format: str,
    output: Path | None,
    image_dir: Path,
    verbose: bool,
) -> None:
    """Compile help markup from INPUT_PATH (or stdin) into HTML or RTF."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    code = _read_input(input_path)

    try:
        document = compile_help(code)
    except CompileError as exc:
        raise HelpgenFailure(f"error parsing code: {exc}", EXIT_COMPILE_ERROR) from exc

    renderer = _select_renderer(output_format, ImageCache(image_dir))
    try:
        rendered = renderer.render(document)
    except RenderError as exc:
        raise HelpgenFailure(f"error generating output: {exc}", EXIT_RENDER_ERROR) from exc

    if output is None:
        click.echo(rendered, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")
    click.echo(f"Rendered: {output}", err=True)


def _read_input(input_path: Path | None) -> bytes:
    if input_path is None:
        return click.get_binary_stream("stdin").read()
    try:
        return input_path.read_bytes()
    except OSError as exc:
        raise HelpgenFailure(f"unable to read file '{input_path}': {exc}", EXIT_READ_ERROR) from exc


def _select_renderer(output_format: str, images: ImageCache) -> HTMLRenderer | RTFRenderer:
    if output_format == "rtf":
        return RTFRenderer(images=images)
    return HTMLRenderer(images=images)


if __name__ == "__main__":  # pragma: no cover
    main()
