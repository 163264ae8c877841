"""Command-line interface for imagespec."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from imagespec.clients import ClientError, ImageClient
from imagespec.codecs import decode_token, encode_token
from imagespec.exceptions import ImageSpecError
from schemas.operation import Filter, FilterKind, Operation, Resize, SampleFilter, Watermark
from schemas.pipeline import Pipeline

DEFAULT_BASE_URL = "http://localhost:3000/image"
DEFAULT_OUTPUT = Path("./output.jpg")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _enum_member(enum_type, value: str):
    name = value.strip().replace("-", "_").upper()
    if name not in enum_type.__members__:
        choices = ", ".join(m.lower().replace("_", "-") for m in enum_type.__members__)
        raise argparse.ArgumentTypeError(f"unknown value {value!r} (choose from {choices})")
    return enum_type[name]


def _pair(value: str, sep: str) -> tuple[int, int]:
    parts = value.split(sep)
    if len(parts) != 2 or not all(p.strip().isdigit() for p in parts):
        raise argparse.ArgumentTypeError(f"expected two integers separated by {sep!r}, got {value!r}")
    return int(parts[0]), int(parts[1])


def parse_resize(value: str) -> Resize:
    """Parse ``WIDTHxHEIGHT[:FILTER]``, e.g. ``600x400:catmull-rom``."""
    size, _, filter_name = value.partition(":")
    width, height = _pair(size, "x")
    sample_filter = _enum_member(SampleFilter, filter_name) if filter_name else SampleFilter.UNDEFINED
    try:
        return Resize.normal(width, height, sample_filter)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(f"invalid resize {value!r}: {e}") from e


def parse_seam_carve(value: str) -> Resize:
    width, height = _pair(value, "x")
    try:
        return Resize.seam_carve(width, height)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(f"invalid seam carve {value!r}: {e}") from e


def parse_filter(value: str) -> Filter:
    return Filter.of(_enum_member(FilterKind, value))


def parse_watermark(value: str) -> Watermark:
    x, y = _pair(value, ",")
    try:
        return Watermark.at(x, y)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(f"invalid watermark {value!r}: {e}") from e


def _build_pipeline(args: argparse.Namespace) -> Pipeline:
    """Pipeline from --json, or from the operation options in command-line order."""
    if args.json is not None:
        return Pipeline.model_validate_json(args.json.read_text())
    operations: list[Operation] = args.operations or []
    return Pipeline.new(operations)


def encode_pipeline(args: argparse.Namespace) -> int:
    """Execute the encode command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        pipeline = _build_pipeline(args)
    except (OSError, ValidationError) as e:
        logger.error(f"Failed to load pipeline: {e}")
        return 1

    if not len(pipeline):
        logger.warning("Pipeline has no operations")

    print(encode_token(pipeline))
    return 0


def decode_pipeline(args: argparse.Namespace) -> int:
    """Execute the decode command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        pipeline = decode_token(args.token)
    except ImageSpecError as e:
        logger.error(f"Failed to decode token: {e.message}")
        return 1

    logger.debug(f"Decoded {len(pipeline)} operations")
    print(pipeline.model_dump_json(indent=2))
    return 0


def build_url(args: argparse.Namespace) -> int:
    """Execute the url command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        pipeline = _build_pipeline(args)
    except (OSError, ValidationError) as e:
        logger.error(f"Failed to load pipeline: {e}")
        return 1

    client = ImageClient({"base_url": args.base_url})
    print(client.build_url(pipeline, args.image_url))
    return 0


def fetch_image(args: argparse.Namespace) -> int:
    """Execute the fetch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        pipeline = _build_pipeline(args)
    except (OSError, ValidationError) as e:
        logger.error(f"Failed to load pipeline: {e}")
        return 1

    config = {
        "base_url": args.base_url,
        "timeout": args.timeout,
        "headers": {"User-Agent": "imagespec/1.0"},
    }

    try:
        with ImageClient(config) as client:
            response = client.fetch(pipeline, args.image_url)

        logger.info(f"{response.http_version} {response.status_code} {response.reason_phrase}")
        for name, value in response.headers.items():
            logger.debug(f"  {name}: {value}")

        output = args.output
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(response.content)
        logger.info(f"Wrote {len(response.content)} bytes to {output}")
        return 0

    except ClientError as e:
        logger.error(f"Failed to fetch image: {e.message}")
        return 1
    except OSError as e:
        logger.error(f"Failed to write image: {e}")
        return 1


def _add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    """Operation options; all append to one list so command-line order is kept."""
    group = parser.add_argument_group("operations (applied in the order given)")
    group.add_argument(
        "--resize",
        dest="operations",
        action="append",
        type=parse_resize,
        metavar="WxH[:FILTER]",
        help="Resize with an optional sampling filter (nearest, triangle, catmull-rom, gaussian, lanczos3)",
    )
    group.add_argument(
        "--seam-carve",
        dest="operations",
        action="append",
        type=parse_seam_carve,
        metavar="WxH",
        help="Content-aware resize by seam carving",
    )
    group.add_argument(
        "--filter",
        dest="operations",
        action="append",
        type=parse_filter,
        metavar="KIND",
        help="Color filter (oceanic, islands, marine)",
    )
    group.add_argument(
        "--watermark",
        dest="operations",
        action="append",
        type=parse_watermark,
        metavar="X,Y",
        help="Watermark position",
    )
    parser.add_argument(
        "--json",
        type=Path,
        default=None,
        help="Read the pipeline from a JSON file instead of operation options",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="imagespec",
        description="Encode image pipelines as URL-safe tokens",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    encode_parser = subparsers.add_parser(
        "encode",
        help="Encode a pipeline as a token",
        description="Encode a pipeline of resize, filter and watermark operations as a URL-safe token.",
    )
    _add_pipeline_arguments(encode_parser)
    encode_parser.set_defaults(func=encode_pipeline)

    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode a token into a pipeline",
        description="Decode a URL-safe token and print the pipeline as JSON.",
    )
    decode_parser.add_argument("token", help="Token to decode")
    decode_parser.set_defaults(func=decode_pipeline)

    url_parser = subparsers.add_parser(
        "url",
        help="Print the image service URL for a pipeline",
        description="Build the image service URL that renders IMAGE_URL through a pipeline.",
    )
    url_parser.add_argument("image_url", help="URL of the source image")
    url_parser.add_argument(
        "--base-url",
        type=str,
        default=DEFAULT_BASE_URL,
        help=f"Image service base URL (default: {DEFAULT_BASE_URL})",
    )
    _add_pipeline_arguments(url_parser)
    url_parser.set_defaults(func=build_url)

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch an image rendered through a pipeline",
        description="Request IMAGE_URL from the image service rendered through a pipeline and save the result.",
    )
    fetch_parser.add_argument("image_url", help="URL of the source image")
    fetch_parser.add_argument(
        "--base-url",
        type=str,
        default=DEFAULT_BASE_URL,
        help=f"Image service base URL (default: {DEFAULT_BASE_URL})",
    )
    fetch_parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"File to write the rendered image to (default: {DEFAULT_OUTPUT})",
    )
    fetch_parser.add_argument(
        "--timeout",
        type=float,
        default=30,
        help="Request timeout in seconds (default: 30)",
    )
    _add_pipeline_arguments(fetch_parser)
    fetch_parser.set_defaults(func=fetch_image)

    args = parser.parse_args(argv)

    if getattr(args, "json", None) is not None and getattr(args, "operations", None):
        parser.error("--json cannot be combined with operation options")

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
