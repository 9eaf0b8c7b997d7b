from __future__ import annotations

import io
import random
import string

import pytest
from lxml import etree
from PIL import Image, ImageDraw, ImageFont

from faultline.config import ImageConfig
from faultline.exceptions import ImageGenerationError
from faultline.images import SVG_NAMESPACE, ErrorImageBuilder


def test_layout_geometry() -> None:
    builder = ErrorImageBuilder(ImageConfig(font_size=10, padding=5, line_spacing=1.5, char_width_ratio=0.6))
    layout = builder.layout("ab\ncdef")
    assert layout.lines == ("ab", "cdef")
    assert layout.line_height == 15
    assert layout.width >= 34
    assert layout.height == 40
    assert layout.top(1) == 20
    assert layout.baseline(1) == 30


def test_layout_expands_tabs_and_keeps_empty_text() -> None:
    builder = ErrorImageBuilder()
    assert builder.layout("Error\n\tat frame").lines == ("Error", "    at frame")
    assert builder.layout("").lines == ("",)


def test_svg_image_is_a_parseable_document() -> None:
    image = ErrorImageBuilder().build_svg_image("Error 500: Internal Server Error\n\tat handler (app.py:3)")
    root = etree.fromstring(image.source)
    assert root.tag == f"{{{SVG_NAMESPACE}}}svg"
    assert root.get("width") == str(image.width)
    assert root.get("height") == str(image.height)
    spans = root.findall(f".//{{{SVG_NAMESPACE}}}tspan")
    assert [span.text for span in spans] == ["Error 500: Internal Server Error", "    at handler (app.py:3)"]


def test_svg_escapes_markup_in_text() -> None:
    image = ErrorImageBuilder().build_svg_image("Error 400: <script>alert(1)</script> & more")
    assert "<script>" not in image.source
    root = etree.fromstring(image.source)
    assert root.find(f".//{{{SVG_NAMESPACE}}}tspan").text == "Error 400: <script>alert(1)</script> & more"


def test_png_image_matches_layout() -> None:
    builder = ErrorImageBuilder()
    text = "Error 503: Service Unavailable\nline two"
    data = builder.build_png(text)
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    layout = builder.layout(text)
    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (layout.width, layout.height)
        assert image.format == "PNG"


def test_svg_and_png_share_dimensions() -> None:
    builder = ErrorImageBuilder()
    text = "Error 404: Not Found"
    svg = builder.build_svg_image(text)
    assert builder.build_png_image(text).size == (svg.width, svg.height)


def test_wide_glyphs_fit_inside_png_canvas() -> None:
    config = ImageConfig()
    builder = ErrorImageBuilder(config)
    text = "Error 500: " + "W" * 100 + "\n\tat handler (app.py:3)"
    image = builder.build_png_image(text)
    font = ImageFont.load_default(size=config.font_size)
    draw = ImageDraw.Draw(image)
    for line in builder.layout(text).lines:
        assert config.padding + draw.textlength(line, font=font) <= image.width
        assert config.padding + draw.textbbox((0, 0), line, font=font)[2] <= image.width
    assert builder.build_svg_image(text).width == image.width


def test_control_characters_fail_svg_generation() -> None:
    with pytest.raises(ImageGenerationError):
        ErrorImageBuilder().build_svg_image("Error 500: \x00 broken")


def test_oversized_input_fails_generation() -> None:
    builder = ErrorImageBuilder(ImageConfig(max_lines=3, max_line_length=10))
    with pytest.raises(ImageGenerationError):
        builder.build_svg_image("a\nb\nc\nd")
    with pytest.raises(ImageGenerationError):
        builder.build_png("x" * 11)


def test_ascii_messages_render_in_both_formats() -> None:
    rng = random.Random(1234)
    alphabet = string.ascii_letters + string.digits + string.punctuation + " "
    builder = ErrorImageBuilder()
    for _ in range(20):
        frames = "".join(
            f"\tat {''.join(rng.choice(alphabet) for _ in range(rng.randint(0, 120)))}\n"
            for _ in range(rng.randint(0, 8))
        )
        message = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 200)))
        text = f"Error 500: {message}\n{frames}"
        assert builder.build_svg_image(text).source
        assert builder.build_png(text)
