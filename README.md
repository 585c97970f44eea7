# lsbsteg

Hide a secret inside an image by rewriting the least significant bits of its
pixel values. Then get the secret back out.

A secret can be a piece of text, an arbitrary file, or another image. A small
JSON header is stored next to each encoded image. It records the secret's
format, its name, its size in bits and how many bits per channel were used.
Decoding reads that header to know what to extract.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

The package installs one command, `lsbsteg`, with two subcommands. To see all
options, run:

```
lsbsteg --help
```

### Encoding

```
lsbsteg encode --format string --text "meet at noon" --cover cover.png --bits 2
lsbsteg encode --format file --input notes.pdf --cover cover.bmp --output out
```

The options are:

- `--format` is required. It takes `string`, `image` or `file`.
- `--cover` is required. It names the image that the secret is hidden in.
- `--input` names the secret file or image. It is required for `file` and
  `image`.
- `--text` gives the secret text for `string`. Without it, lines are read from
  standard input up to the first empty line, and each line keeps a trailing
  newline.
- `--output` is the output directory. It defaults to `encoded`.
- `--bits` is the number of low bits used per channel, from 1 to 8. It
  defaults to 1.

The encoded image is written to `<output>/<secret name without extension>/`.
For string and file secrets the image is named `<stem>.bmp`. For image
secrets it keeps the secret's own file name. The header is written beside it
as `json/header.json`.

### Decoding

```
lsbsteg decode encoded/notes/notes.bmp
lsbsteg decode stego.png --header path/to/header.json
```

By default the header is read from `json/header.json` in the image's
directory. What happens to the recovered secret depends on its format:

- A string secret is printed.
- A file secret is written to a `decode` folder beside the image, under the
  name recorded in the header.
- An image secret is opened as an image file and saved to that same `decode`
  folder.

On errors the command prints `error: ...` to standard error and exits with
status 1.

## Library use

```python
from lsbsteg.secret import SecretHeader, SecretFormat, EncodingMethod, LSBHeader
from lsbsteg.lsb import encode_color_lsb, decode_color_lsb
from lsbsteg.imaging import load_image, save_image

cover = load_image("cover.bmp", False)
data = b"meet at noon\n"
header = SecretHeader(
    format=SecretFormat.STRING,
    encoding_method=EncodingMethod.LSB,
    name="secret.txt",
    secret_size_bits=len(data) * 8,
    encoding_header=LSBHeader(bits_used_per_channel=2),
)
encoded = encode_color_lsb(cover, header, data)
save_image("encoded.bmp", encoded)

assert decode_color_lsb(encoded, header) == data
```

The modules are:

- `lsbsteg.secret` defines the header types. It also provides the binary form
  (`encode_secret_header` / `decode_secret_header`) and the JSON form
  (`serialize_secret_header` / `deserialize_secret_header`).
- `lsbsteg.lsb` provides `encode_grayscale_lsb`, `encode_color_lsb`,
  `decode_grayscale_lsb` and `decode_color_lsb`. These work on numpy `uint8`
  arrays. Bits go in row-major order, starting from the least significant bit
  of the first secret byte. A secret larger than the image's capacity is
  truncated without an error.
- `lsbsteg.bits` provides `get_bit`, `is_image_grayscale` and
  `generate_image_secret`, plus the path helpers `extract_file_name`,
  `file_name_without_extension` and `parent_directory`.
- `lsbsteg.imaging` provides `load_image`, `save_image`, `resize_image`,
  `negative_image`, `color_to_gray` and `iter_files`.
- `lsbsteg.app` provides `encode_message`, `decode_message`,
  `process_decoded_secret`, `load_secret_header_from_file` and `main`.

## Limitations

- LSB is the only embedding method.
- The header is never embedded in the image. It lives only in the separate
  JSON file, and decoding fails without it.
- An image secret is hidden as its raw pixel bytes, not as an image file.
  Decoding therefore cannot rebuild it into an image: it reports
  "Failed to decode image from secret data." and the raw bytes are only
  returned by `decode_message`.
- There is no interactive menu, file-picker dialog or image viewer. Everything
  is driven by command-line arguments or library calls.
- Encoded images must be saved in a lossless format such as BMP or PNG. Lossy
  compression destroys the hidden bits.