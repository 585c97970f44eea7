import io

import numpy as np
import pytest
from PIL import Image

from lsbsteg.app import (
    decode_message,
    encode_message,
    load_secret_header_from_file,
    main,
    process_decoded_secret,
)
from lsbsteg.bits import generate_image_secret
from lsbsteg.imaging import load_image, save_image
from lsbsteg.secret import (
    LSBHeader,
    SecretFormat,
    SecretHeader,
    encode_secret_header,
    serialize_secret_header,
)


def _write_cover(path, height=16, width=16):
    pixels = np.random.default_rng(0).integers(0, 256, (height, width, 3), dtype=np.uint8)
    save_image(path, pixels)
    return pixels


@pytest.fixture
def cover(tmp_path):
    path = tmp_path / "cover.png"
    _write_cover(path)
    return path


def test_load_secret_header_round_trip(tmp_path):
    header = SecretHeader(
        format=SecretFormat.FILE,
        name="notes.bin",
        secret_size_bits=64,
        encoding_header=LSBHeader(bits_used_per_channel=3),
        header_size_bytes=37,
    )
    path = tmp_path / "header.json"
    path.write_text(serialize_secret_header(header), encoding="utf-8")
    assert load_secret_header_from_file(path) == header


def test_load_secret_header_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_secret_header_from_file(tmp_path / "absent.json")


def test_process_string_prints_message(tmp_path, capsys):
    header = SecretHeader(format=SecretFormat.STRING, name="secret.txt", secret_size_bits=40)
    result = process_decoded_secret(b"hello", header, tmp_path / "img.bmp")
    assert result is None
    assert "Decoded string:\nhello\n" in capsys.readouterr().out
    assert (tmp_path / "decode").is_dir()


def test_process_file_writes_bytes(tmp_path):
    data = bytes(range(50))
    header = SecretHeader(format=SecretFormat.FILE, name="blob.bin", secret_size_bits=len(data) * 8)
    result = process_decoded_secret(data, header, tmp_path / "img.bmp")
    assert result == tmp_path / "decode" / "blob.bin"
    assert result.read_bytes() == data


def test_process_image_decodes_encoded_file(tmp_path):
    pixels = np.arange(4 * 5 * 3, dtype=np.uint8).reshape(4, 5, 3)
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    data = buffer.getvalue()
    header = SecretHeader(format=SecretFormat.IMAGE, name="copy.png", secret_size_bits=len(data) * 8)
    result = process_decoded_secret(data, header, tmp_path / "img.bmp")
    assert result == tmp_path / "decode" / "copy.png"
    assert np.array_equal(load_image(result), pixels)


def test_process_image_rejects_raw_bytes(tmp_path, capsys):
    header = SecretHeader(format=SecretFormat.IMAGE, name="copy.png", secret_size_bits=32)
    assert process_decoded_secret(b"\x01\x02\x03\x04", header, tmp_path / "img.bmp") is None
    assert "Failed to decode image from secret data." in capsys.readouterr().out


def test_string_round_trip(tmp_path, cover, capsys):
    out_dir = tmp_path / "out"
    message = b"hello there"
    image_path, header_path = encode_message(
        message, SecretFormat.STRING, "secret.txt", cover, out_dir, 2
    )
    assert image_path == out_dir / "secret" / "secret.bmp"
    assert header_path == out_dir / "secret" / "json" / "header.json"

    assert decode_message(image_path) == message
    assert "Decoded string:\nhello there\n" in capsys.readouterr().out


def test_written_header_describes_secret(tmp_path, cover):
    message = b"abcdef"
    _, header_path = encode_message(
        message, SecretFormat.STRING, "secret.txt", cover, tmp_path / "out", 4
    )
    header = load_secret_header_from_file(header_path)
    assert header.format is SecretFormat.STRING
    assert header.name == "secret.txt"
    assert header.secret_size_bits == len(message) * 8
    assert header.encoding_header.bits_used_per_channel == 4
    assert header.header_size_bytes == len(encode_secret_header(header))


def test_file_round_trip_writes_decoded_copy(tmp_path, cover):
    data = bytes(range(100))
    image_path, _ = encode_message(
        data, SecretFormat.FILE, "payload.bin", cover, tmp_path / "out", 3
    )
    assert decode_message(image_path) == data
    assert (image_path.parent / "decode" / "payload.bin").read_bytes() == data


def test_image_secret_round_trip(tmp_path, cover, capsys):
    small = np.random.default_rng(1).integers(0, 256, (4, 4, 3), dtype=np.uint8)
    secret = generate_image_secret(small)
    image_path, _ = encode_message(
        secret, SecretFormat.IMAGE, "pic.png", cover, tmp_path / "out", 2
    )
    assert image_path.name == "pic.png"
    assert decode_message(image_path) == secret
    assert "Failed to decode image from secret data." in capsys.readouterr().out


def test_oversized_secret_is_truncated(tmp_path):
    cover_path = tmp_path / "tiny.png"
    _write_cover(cover_path, height=2, width=2)
    data = bytes(range(1, 21))
    image_path, _ = encode_message(
        data, SecretFormat.FILE, "big.bin", cover_path, tmp_path / "out", 8
    )
    assert decode_message(image_path) == data[:12]


def test_invalid_bits_rejected_before_writing(tmp_path, cover):
    out_dir = tmp_path / "out"
    with pytest.raises(ValueError):
        encode_message(b"x", SecretFormat.STRING, "secret.txt", cover, out_dir, 0)
    assert not out_dir.exists()


def test_explicit_header_path(tmp_path, cover):
    image_path, header_path = encode_message(
        b"moved", SecretFormat.FILE, "m.bin", cover, tmp_path / "out", 1
    )
    moved = tmp_path / "elsewhere.json"
    moved.write_bytes(header_path.read_bytes())
    header_path.unlink()
    assert decode_message(image_path, moved) == b"moved"


def test_main_file_round_trip(tmp_path, cover):
    data = b"command line payload"
    source = tmp_path / "data.bin"
    source.write_bytes(data)
    out_dir = tmp_path / "out"
    assert main([
        "encode", "--format", "file", "--input", str(source),
        "--cover", str(cover), "--output", str(out_dir), "--bits", "2",
    ]) == 0
    stego = out_dir / "data" / "data.bmp"
    assert main(["decode", str(stego)]) == 0
    assert (out_dir / "data" / "decode" / "data.bin").read_bytes() == data


def test_main_string_from_stdin(tmp_path, cover, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("line one\nline two\n\nignored\n"))
    out_dir = tmp_path / "out"
    assert main(["encode", "--format", "string", "--cover", str(cover), "--output", str(out_dir)]) == 0
    assert decode_message(out_dir / "secret" / "secret.bmp") == b"line one\nline two\n"


def test_main_missing_cover_fails(tmp_path, capsys):
    status = main([
        "encode", "--format", "string", "--text", "hi",
        "--cover", str(tmp_path / "absent.png"), "--output", str(tmp_path / "out"),
    ])
    assert status == 1
    assert "error:" in capsys.readouterr().err


def test_main_file_format_requires_input(tmp_path, cover):
    status = main(["encode", "--format", "file", "--cover", str(cover), "--output", str(tmp_path)])
    assert status == 1