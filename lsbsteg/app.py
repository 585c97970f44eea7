"""Command-line workflow: hide a secret in an image and recover it again.

Encoding writes the stego image into ``<output>/<secret stem>/``. The header
describing the secret goes beside it as ``json/header.json``. Decoding looks
for that header next to the image unless another path is given.
"""

from __future__ import annotations

import argparse
import io
import sys
from collections.abc import Iterable
from itertools import takewhile
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .bits import (
    extract_file_name,
    file_name_without_extension,
    generate_image_secret,
    is_image_grayscale,
)
from .imaging import load_image, save_image
from .lsb import (
    decode_color_lsb,
    decode_grayscale_lsb,
    encode_color_lsb,
    encode_grayscale_lsb,
)
from .secret import (
    EncodingMethod,
    LSBHeader,
    SecretFormat,
    SecretHeader,
    deserialize_secret_header,
    encode_secret_header,
    serialize_secret_header,
)

SECRET_HEADER_PATH = Path("json") / "header.json"
DEFAULT_OUTPUT_DIR = "encoded"
STRING_SECRET_NAME = "secret.txt"


def load_secret_header_from_file(path) -> SecretHeader:
    """Read a JSON secret header from ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise OSError(f"failed to open JSON file: {path}") from exc
    return deserialize_secret_header(text)


def process_decoded_secret(secret: bytes, header: SecretHeader, image_path):
    """Deliver a recovered secret and return the written path, if any.

    A string is printed. A file or an image goes to a ``decode`` folder
    beside ``image_path``.
    """
    output_folder = Path(image_path).parent / "decode"
    output_folder.mkdir(parents=True, exist_ok=True)
    output_path = output_folder / extract_file_name(header.name)
    data = bytes(secret)

    if header.format is SecretFormat.STRING:
        print(f"Decoded string:\n{data.decode('utf-8', errors='replace')}")
        return None

    if header.format is SecretFormat.FILE:
        try:
            output_path.write_bytes(data)
        except OSError:
            print(f"Failed to write decoded file to: {output_path}")
            return None
        print(f"Decoded file saved to: {output_path}")
        return output_path

    try:
        with Image.open(io.BytesIO(data)) as decoded:
            decoded.load()
            image = decoded.copy()
    except (UnidentifiedImageError, OSError):
        print("Failed to decode image from secret data.")
        return None
    try:
        image.save(output_path)
    except (OSError, ValueError):
        print(f"Failed to write decoded image to: {output_path}")
        return None
    print(f"Decoded image saved to: {output_path}")
    return output_path


def decode_message(image_path, header_path=None) -> bytes:
    """Recover the secret hidden in ``image_path``, deliver it and return its bytes."""
    image_path = Path(image_path)
    if header_path is None:
        header_path = image_path.parent / SECRET_HEADER_PATH
    image = load_image(image_path)
    header = load_secret_header_from_file(header_path)
    if header.encoding_method is not EncodingMethod.LSB:
        raise ValueError(f"unsupported encoding method: {header.encoding_method!r}")

    decoder = decode_grayscale_lsb if is_image_grayscale(image) else decode_color_lsb
    recovered = decoder(image, header)
    process_decoded_secret(recovered, header, image_path)
    return recovered


def encode_message(secret, secret_format, name, cover_path, output_dir, bits_per_channel):
    """Hide ``secret`` in the image at ``cover_path`` with LSB embedding.

    Returns the paths of the written stego image and of its JSON header.
    """
    payload = bytes(secret)
    header = SecretHeader(
        format=secret_format,
        name=name,
        secret_size_bits=len(payload) * 8,
        encoding_method=EncodingMethod.LSB,
        encoding_header=LSBHeader(bits_used_per_channel=bits_per_channel),
    )
    header.header_size_bytes = len(encode_secret_header(header))

    cover = load_image(cover_path)
    if cover.size == 0:
        raise ValueError("the image where the secret should be encoded is empty")

    encoder = encode_grayscale_lsb if is_image_grayscale(cover) else encode_color_lsb
    encoded = encoder(cover, header, payload)

    stem = file_name_without_extension(header.name)
    output_folder = Path(output_dir) / stem
    json_folder = output_folder / SECRET_HEADER_PATH.parent
    json_folder.mkdir(parents=True, exist_ok=True)

    if header.format is SecretFormat.IMAGE:
        image_name = header.name
    else:
        image_name = f"{stem}.bmp"
    image_path = output_folder / image_name
    save_image(image_path, encoded)

    header_path = output_folder / SECRET_HEADER_PATH
    header_path.write_text(serialize_secret_header(header), encoding="utf-8")

    print(f"Encoded image saved to: {output_folder}")
    print(f"Secret header saved to: {header_path}")
    return image_path, header_path


def _read_message(stream: Iterable[str]) -> str:
    """Collect lines up to the first empty one, each ending in a newline."""
    lines = (line.rstrip("\r\n") for line in stream)
    return "".join(f"{line}\n" for line in takewhile(bool, lines))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lsbsteg", description="Hide secrets in images and recover them."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    decode = commands.add_parser("decode", help="recover a secret from an image")
    decode.add_argument("image", help="stego image to decode")
    decode.add_argument("--header", help="JSON header (default: json/header.json beside the image)")

    encode = commands.add_parser("encode", help="hide a secret in an image")
    encode.add_argument(
        "--format", choices=("string", "image", "file"), required=True,
        help="kind of secret to hide",
    )
    encode.add_argument("--input", help="secret file or image (for --format file/image)")
    encode.add_argument("--text", help="secret text (for --format string; default: read stdin)")
    encode.add_argument("--cover", required=True, help="image to hide the secret in")
    encode.add_argument("--output", default=DEFAULT_OUTPUT_DIR, help="output directory")
    encode.add_argument("--bits", type=int, default=1, help="bits used per channel (1-8)")
    return parser


def _run_encode(args: argparse.Namespace) -> None:
    if args.format == "string":
        text = args.text if args.text is not None else _read_message(sys.stdin)
        payload = text.encode()
        secret_format = SecretFormat.STRING
        name = STRING_SECRET_NAME
    else:
        if args.input is None:
            raise ValueError(f"--input is required for --format {args.format}")
        name = extract_file_name(str(args.input))
        if args.format == "image":
            payload = generate_image_secret(load_image(args.input))
            secret_format = SecretFormat.IMAGE
        else:
            payload = Path(args.input).read_bytes()
            secret_format = SecretFormat.FILE
    encode_message(payload, secret_format, name, args.cover, args.output, args.bits)


def main(argv=None) -> int:
    """Run the command line; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "decode":
            decode_message(args.image, args.header)
        else:
            _run_encode(args)
    except (OSError, ValueError, IndexError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0