"""CLI entry point for Pagesmith."""

from __future__ import annotations

import argparse
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from pagesmith import __version__, logger
from pagesmith.dependencies import ensure_cli_dependencies
from pagesmith.exceptions import PackageError
from pagesmith.intake import DOCUMENT_MIME_TYPES, IMAGE_MIME_TYPES, validate_batch
from pagesmith.logging import configure_logging
from pagesmith.settings import get_settings
from pagesmith.typing.enums import CompressionLevel, Orientation, PageSizeName, RasterFormat
from pagesmith.typing.models import DocumentInput, ImageInput, PageSetup, RasterSettings, SplitSpec

if TYPE_CHECKING:
    from collections.abc import Callable

    from pagesmith.settings import Settings
    from pagesmith.typing.models import NamedOutput


class CommandResult(NamedTuple):
    """Outputs of one CLI command and the number of failed units."""

    outputs: list[NamedOutput]
    failures: int = 0


def _split_spec_from_cli(value: str) -> SplitSpec:
    """Convert a `--range` value (`START-END` or `START-END:NAME`) into a split spec.

    Args:
        value (str): CLI value.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed.

    Returns:
        SplitSpec: Parsed spec.
    """
    bounds, _, name = value.partition(":")
    start, _, end = bounds.partition("-")
    try:
        first = int(start)
        last = int(end) if end else first
        return SplitSpec(start=first, end=last, output_name=name.strip() or None)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"--range must look like 1-3 or 1-3:Name, got {value!r}") from exc  # noqa: TRY003


def _page_order_from_cli(value: str) -> list[int]:
    """Convert a `--order` value such as `3,1,2` into page numbers.

    Raises:
        argparse.ArgumentTypeError: If a token is not an integer.
    """
    try:
        return [int(token) for token in value.split(",") if token.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"--order must be comma-separated page numbers, got {value!r}") from exc  # noqa: TRY003


def _enum_from_cli[E: (CompressionLevel, Orientation, PageSizeName, RasterFormat)](enum_type: type[E]) -> Callable[[str], E]:
    def _convert(value: str) -> E:
        try:
            return enum_type.from_str(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return _convert


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pagesmith")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--output-dir", type=Path, default=None, dest="output_dir")
    common.add_argument(
        "--compression",
        type=_enum_from_cli(CompressionLevel),
        default=None,
        dest="compression",
    )

    subparsers = parser.add_subparsers(dest="command")

    merge_parser = subparsers.add_parser("merge", parents=[common], help="Merge PDFs in the given order")
    merge_parser.add_argument("inputs", nargs="+", type=Path)

    split_parser = subparsers.add_parser("split", parents=[common], help="Split a PDF by page ranges")
    split_parser.add_argument("input_path", type=Path)
    split_parser.add_argument(
        "--range",
        required=True,
        action="append",
        type=_split_spec_from_cli,
        dest="specs",
    )
    split_parser.add_argument("--all-or-nothing", action="store_true", dest="all_or_nothing")
    split_parser.add_argument("--workers", type=int, default=None, dest="max_workers")

    extract_parser = subparsers.add_parser("extract", parents=[common], help="Extract selected pages")
    extract_parser.add_argument("input_path", type=Path)
    extract_parser.add_argument("--pages", required=True, dest="pages")

    rearrange_parser = subparsers.add_parser("rearrange", parents=[common], help="Reorder pages")
    rearrange_parser.add_argument("input_path", type=Path)
    rearrange_parser.add_argument("--order", required=True, type=_page_order_from_cli, dest="order")

    compress_parser = subparsers.add_parser("compress", parents=[common], help="Rewrite a PDF compactly")
    compress_parser.add_argument("input_path", type=Path)

    images_parser = subparsers.add_parser("images-to-pdf", parents=[common], help="Convert images to a PDF")
    images_parser.add_argument("inputs", nargs="+", type=Path)
    images_parser.add_argument("--page-size", type=_enum_from_cli(PageSizeName), default=None, dest="page_size")
    images_parser.add_argument(
        "--orientation",
        type=_enum_from_cli(Orientation),
        default=None,
        dest="orientation",
    )
    images_parser.add_argument("--margin-mm", type=float, default=None, dest="margin_mm")
    images_parser.add_argument("--width-pt", type=float, default=None, dest="custom_width_pt")
    images_parser.add_argument("--height-pt", type=float, default=None, dest="custom_height_pt")

    raster_parser = subparsers.add_parser("pdf-to-images", parents=[common], help="Render PDF pages to images")
    raster_parser.add_argument("input_path", type=Path)
    raster_parser.add_argument("--pages", default="all", dest="pages")
    raster_parser.add_argument("--format", type=_enum_from_cli(RasterFormat), default=None, dest="image_format")
    raster_parser.add_argument("--dpi", type=int, default=None)
    raster_parser.add_argument("--quality", type=int, default=None)
    raster_parser.add_argument("--all-or-nothing", action="store_true", dest="all_or_nothing")
    raster_parser.add_argument("--workers", type=int, default=None, dest="max_workers")

    return parser


def _read_document(path: Path) -> DocumentInput:
    return DocumentInput(name=path.name, data=path.read_bytes())


def _read_image(path: Path) -> ImageInput:
    mime_type, _ = mimetypes.guess_type(path.name)
    return ImageInput(name=path.name, data=path.read_bytes(), mime_type=mime_type or "application/octet-stream")


def _build_page_setup(args: argparse.Namespace, settings: Settings) -> PageSetup:
    """Build the image page setup from CLI arguments and settings defaults.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        PageSetup: Page geometry.
    """
    page_size = args.page_size or settings.default_page_size
    if args.page_size is None and args.custom_width_pt and args.custom_height_pt:
        page_size = PageSizeName.CUSTOM
    return PageSetup(
        page_size=page_size,
        orientation=args.orientation or settings.default_orientation,
        margin_mm=settings.default_margin_mm if args.margin_mm is None else args.margin_mm,
        custom_width_pt=args.custom_width_pt,
        custom_height_pt=args.custom_height_pt,
    )


def _build_raster_settings(args: argparse.Namespace, settings: Settings) -> RasterSettings:
    """Build rasterization settings from CLI arguments and settings defaults.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        RasterSettings: Resolution and encoding.
    """
    return RasterSettings(
        format=args.image_format or settings.default_raster_format,
        dpi=args.dpi or settings.default_dpi,
        quality=settings.default_quality if args.quality is None else args.quality,
    )


def run_command(args: argparse.Namespace, settings: Settings) -> CommandResult:
    """Read inputs, run the requested operation and return its outputs.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Raises:
        ValueError: If the command is unknown.

    Returns:
        CommandResult: Produced outputs and failed unit count.
    """
    from pagesmith import operations  # noqa: PLC0415

    if args.command == "images-to-pdf":
        images = [_read_image(path) for path in args.inputs]
        validate_batch(images, IMAGE_MIME_TYPES, settings=settings)
        output = operations.images_to_document(
            images,
            _build_page_setup(args, settings),
            settings=settings,
            compression=args.compression,
        )
        return CommandResult(outputs=[output])

    if args.command == "merge":
        documents = [_read_document(path) for path in args.inputs]
        validate_batch(documents, DOCUMENT_MIME_TYPES, settings=settings)
        return CommandResult(
            outputs=[operations.merge_documents(documents, settings=settings, compression=args.compression)],
        )

    document = _read_document(args.input_path)
    validate_batch([document], DOCUMENT_MIME_TYPES, settings=settings)

    if args.command == "split":
        split = operations.split_document(
            document,
            args.specs,
            settings=settings,
            all_or_nothing=args.all_or_nothing,
            max_workers=args.max_workers,
            compression=args.compression,
        )
        return CommandResult(outputs=split.outputs, failures=len(split.failures))
    if args.command == "extract":
        output = operations.extract_pages(document, args.pages, settings=settings, compression=args.compression)
        return CommandResult(outputs=[output])
    if args.command == "rearrange":
        output = operations.rearrange_pages(document, args.order, settings=settings, compression=args.compression)
        return CommandResult(outputs=[output])
    if args.command == "compress":
        return CommandResult(outputs=[operations.compress_document(document, args.compression, settings=settings)])
    if args.command == "pdf-to-images":
        export = operations.document_to_images(
            document,
            args.pages,
            _build_raster_settings(args, settings),
            settings=settings,
            all_or_nothing=args.all_or_nothing,
            max_workers=args.max_workers,
        )
        return CommandResult(outputs=export.images, failures=len(export.failures))

    raise ValueError(f"Unknown command: {args.command}")  # noqa: TRY003


def persist_outputs(outputs: list[NamedOutput], output_dir: Path) -> list[Path]:
    """Write outputs to ``output_dir``.

    Args:
        outputs (list[NamedOutput]): Produced buffers.
        output_dir (Path): Target directory, created when missing.

    Returns:
        list[Path]: Written file paths.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for output in outputs:
        path = output_dir / Path(output.name).name
        path.write_bytes(output.data)
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error or partial failure).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    output_dir = args.output_dir or Path(settings.results_dir)
    try:
        ensure_cli_dependencies(args.command)
        result = run_command(args, settings)
        written = persist_outputs(result.outputs, output_dir)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1

    logger.info(
        "Command completed",
        extra={
            "command": args.command,
            "outputs": [str(path) for path in written],
            "failures": result.failures,
        },
    )
    return 1 if result.failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
