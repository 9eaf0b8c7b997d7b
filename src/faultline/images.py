"""Render error text into self-contained SVG and PNG images.

Both renditions share one :class:`ImageLayout` so the raster image carries the
same lines at the same geometry as the vector document.
"""

from __future__ import annotations

import io
import math
from dataclasses import dataclass

from lxml import etree
from PIL import Image, ImageDraw, ImageFont

from .config import ImageConfig
from .exceptions import ImageGenerationError

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"
_TAB_SIZE = 4


def _svg(tag: str) -> str:
    return f"{{{SVG_NAMESPACE}}}{tag}"


@dataclass(slots=True, frozen=True)
class ImageLayout:
    lines: tuple[str, ...]
    width: int
    height: int
    padding: int
    font_size: int
    line_height: int

    def baseline(self, index: int) -> int:
        return self.padding + index * self.line_height + self.font_size

    def top(self, index: int) -> int:
        return self.padding + index * self.line_height


@dataclass(slots=True, frozen=True)
class SVGImage:
    """Serialized SVG document together with its pixel size."""

    source: str
    width: int
    height: int
    lines: tuple[str, ...]


class ErrorImageBuilder:
    """Lay out a block of text and draw it as SVG or PNG."""

    def __init__(self, config: ImageConfig | None = None) -> None:
        self.config = config or ImageConfig()
        self._font: ImageFont.ImageFont | ImageFont.FreeTypeFont | None = None

    def layout(self, text: str) -> ImageLayout:
        config = self.config
        lines = tuple(text.expandtabs(_TAB_SIZE).splitlines()) or ("",)
        if len(lines) > config.max_lines:
            raise ImageGenerationError(f"Error text has {len(lines)} lines, limit is {config.max_lines}")
        longest = max(len(line) for line in lines)
        if longest > config.max_line_length:
            raise ImageGenerationError(
                f"Error text has a {longest} character line, limit is {config.max_line_length}"
            )
        char_width = config.font_size * config.char_width_ratio
        line_height = int(round(config.font_size * config.line_spacing))
        # The raster font is proportional, so the canvas must hold its widest line too.
        text_width = max(max(int(round(len(line) * char_width)), self._measure(line)) for line in lines)
        width = text_width + 2 * config.padding
        height = len(lines) * line_height + 2 * config.padding
        return ImageLayout(
            lines=lines,
            width=max(width, 1),
            height=max(height, 1),
            padding=config.padding,
            font_size=config.font_size,
            line_height=line_height,
        )

    def build_svg_image(self, text: str) -> SVGImage:
        """Return an SVG document displaying ``text``."""

        layout = self.layout(text)
        config = self.config
        try:
            root = etree.Element(
                _svg("svg"),
                nsmap={None: SVG_NAMESPACE},
                width=str(layout.width),
                height=str(layout.height),
                viewBox=f"0 0 {layout.width} {layout.height}",
            )
            etree.SubElement(root, _svg("rect"), width="100%", height="100%", fill=config.background)
            block = etree.SubElement(
                root,
                _svg("text"),
                {
                    "font-family": config.font_family,
                    "font-size": str(layout.font_size),
                    "fill": config.foreground,
                    _XML_SPACE: "preserve",
                },
            )
            for index, line in enumerate(layout.lines):
                span = etree.SubElement(block, _svg("tspan"), x=str(layout.padding), y=str(layout.baseline(index)))
                span.text = line
            source = etree.tostring(root, encoding="unicode")
            # Re-parse so a document lxml cannot read back never leaves the builder.
            etree.fromstring(source)
        except (ValueError, etree.LxmlError) as exc:
            raise ImageGenerationError(f"Unable to build SVG error image: {exc}") from exc
        return SVGImage(source=source, width=layout.width, height=layout.height, lines=layout.lines)

    def build_png_image(self, text: str) -> Image.Image:
        """Return a raster image displaying ``text``."""

        layout = self.layout(text)
        config = self.config
        try:
            image = Image.new("RGB", (layout.width, layout.height), color=config.background)
            draw = ImageDraw.Draw(image)
            font = self._load_font()
            for index, line in enumerate(layout.lines):
                draw.text((layout.padding, layout.top(index)), line, fill=config.foreground, font=font)
        except (OSError, ValueError) as exc:
            raise ImageGenerationError(f"Unable to draw PNG error image: {exc}") from exc
        return image

    def encode_png(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        try:
            image.save(buffer, format="PNG")
        except (OSError, ValueError) as exc:
            raise ImageGenerationError(f"Unable to encode PNG error image: {exc}") from exc
        return buffer.getvalue()

    def build_png(self, text: str) -> bytes:
        return self.encode_png(self.build_png_image(text))

    def _measure(self, line: str) -> int:
        font = self._load_font()
        try:
            right = max(font.getlength(line), font.getbbox(line)[2]) if line else 0
        except (OSError, ValueError) as exc:
            raise ImageGenerationError(f"Unable to measure error text: {exc}") from exc
        return math.ceil(right)

    def _load_font(self) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
        if self._font is None:
            self._font = ImageFont.load_default(size=self.config.font_size)
        return self._font


__all__ = ["ErrorImageBuilder", "ImageLayout", "SVGImage", "SVG_NAMESPACE"]
