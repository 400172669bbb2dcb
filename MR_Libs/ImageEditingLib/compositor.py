"""
Compositor: turns a source photo and an EditState into a raster frame.

Rendering happens on a working canvas BASE_FRAME_WIDTH pixels wide whose
height follows the source aspect ratio. Stages run in a fixed order because
later stages occlude earlier ones:

1. Pan then zoom, pivoting around the frame center
2. Brightness, contrast and grayscale (CSS filter-effects maths)
3. Composite the photo over the frame background
4. Annotation badge, fixed in frame coordinates

All functions are pure: the source image is never modified.

Example:
    >>> from PIL import Image
    >>> from MR_Libs.ImageEditingLib.compositor import preview_frame, apply_crop, finalize
    >>> state = EditState(transform=Transform(zoom=1.5), crop_aspect=1.0)
    >>> frame = preview_frame(Image.open("meter.jpg"), state)
    >>> jpeg_bytes = finalize(apply_crop(frame, state.crop_aspect))
"""

import io
import logging
from typing import Any, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from MR_Libs.errors import AssetError, SessionError
from MR_Libs.ImageEditingLib.annotation import draw_annotation_badge
from MR_Libs.ImageEditingLib.edit_models import CompositorConfig, EditState, FilterSettings

logger = logging.getLogger(__name__)

JPEG_MAGIC = b"\xff\xd8\xff"

# Rec. 709 luma weights used by the CSS grayscale() matrix
_LUMA = np.array([0.2126, 0.7152, 0.0722], dtype=np.float32)


def frame_size(source_size: Tuple[int, int], base_width: int) -> Tuple[int, int]:
    """Working canvas size: fixed width, height proportional to the source."""
    src_w, src_h = source_size
    if src_w <= 0 or src_h <= 0:
        raise ValueError(f"source size must be positive, got {source_size}")
    return base_width, max(1, int(round(src_h / src_w * base_width)))


def _grayscale_matrix(amount: float) -> Any:
    inverse = 1.0 - amount
    matrix = np.tile(_LUMA, (3, 1)) * amount
    matrix += np.eye(3, dtype=np.float32) * inverse
    return matrix


def apply_filters(image: Any, filters: FilterSettings) -> Any:
    """
    Apply brightness, contrast and grayscale in that order.

    Each stage matches the CSS filter function of the same name and the
    result is clamped after every stage. Alpha is left untouched.

    Args:
        image: PIL Image (RGB or RGBA)
        filters: Filter percentages

    Returns:
        A new PIL Image in the same mode as the input
    """
    if not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if filters.is_identity:
        return image.copy()

    original_mode = image.mode
    pixels = np.asarray(image.convert("RGBA"), dtype=np.float32)
    rgb = pixels[..., :3] / 255.0

    rgb = np.clip(rgb * (filters.brightness / 100.0), 0.0, 1.0)

    slope = filters.contrast / 100.0
    rgb = np.clip((rgb - 0.5) * slope + 0.5, 0.0, 1.0)

    if filters.grayscale:
        rgb = np.clip(rgb @ _grayscale_matrix(filters.grayscale / 100.0).T, 0.0, 1.0)

    output = pixels.copy()
    output[..., :3] = np.round(rgb * 255.0)
    result = Image.fromarray(output.astype(np.uint8))
    if original_mode != "RGBA":
        result = result.convert(original_mode if original_mode in ("RGB", "L") else "RGB")
    return result


def preview_frame(source: Any, state: EditState, config: Optional[CompositorConfig] = None) -> Any:
    """
    Render the working frame for a source image and edit state.

    Args:
        source: Decoded PIL Image (left unmodified)
        state: Edit state to render
        config: Rendering configuration (defaults to CompositorConfig())

    Returns:
        RGB PIL Image of size base_width x proportional height
    """
    if not hasattr(source, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(source)}")

    config = config or CompositorConfig()
    width, height = frame_size(source.size, config.base_width)

    # Stretch to the frame first so zoom only ever upsamples
    layer = source.convert("RGBA").resize((width, height), Image.Resampling.LANCZOS)

    transform = state.transform
    if not transform.is_identity:
        center_x, center_y = width / 2.0, height / 2.0
        inverse = 1.0 / transform.zoom
        # Output (x, y) samples the layer at ((x - cx - ox) / z + cx, (y - cy - oy) / z + cy)
        coefficients = (
            inverse, 0.0, center_x - (center_x + transform.offset_x) * inverse,
            0.0, inverse, center_y - (center_y + transform.offset_y) * inverse,
        )
        layer = layer.transform(
            (width, height),
            Image.Transform.AFFINE,
            coefficients,
            resample=Image.Resampling.BICUBIC,
            fillcolor=(0, 0, 0, 0),
        )

    layer = apply_filters(layer, state.filters)

    frame = Image.new("RGBA", (width, height), tuple(config.background) + (255,))
    frame = Image.alpha_composite(frame, layer).convert("RGB")

    draw_annotation_badge(frame, state.annotation_text, config.font_path, config.badge_font_size)

    logger.debug(
        f"Rendered frame {width}x{height} zoom={transform.zoom:.2f} "
        f"offset=({transform.offset_x:.1f}, {transform.offset_y:.1f}) "
        f"badge={state.has_annotation}"
    )
    return frame


def apply_crop(frame: Any, crop_aspect: Optional[float], config: Optional[CompositorConfig] = None) -> Any:
    """
    Recrop the center of a previewed frame to a fixed aspect ratio.

    The output is base_width wide and base_width / crop_aspect tall; parts of
    the target that fall outside the frame are filled with the background.
    A free aspect (None) returns an unchanged copy of the frame.

    Raises:
        SessionError: If the target dimensions are not positive
    """
    if crop_aspect is None:
        return frame.copy()

    config = config or CompositorConfig()
    if crop_aspect <= 0:
        raise SessionError(f"crop aspect must be positive, got {crop_aspect}")

    out_w = config.base_width
    out_h = int(round(out_w / crop_aspect))
    if out_w <= 0 or out_h <= 0:
        raise SessionError(f"crop target must be positive, got {out_w}x{out_h}")

    left = int(round((frame.width - out_w) / 2.0))
    top = int(round((frame.height - out_h) / 2.0))

    cropped = Image.new("RGB", (out_w, out_h), tuple(config.background))
    cropped.paste(frame.convert("RGB"), (-left, -top))
    return cropped


def finalize(buffer: Union[Any, bytes], quality: int = 90) -> bytes:
    """
    Encode a frame as JPEG for storage as a PhotoRecord.

    Bytes that are already JPEG-encoded are returned unchanged, so finalizing
    twice yields identical bytes.
    """
    if isinstance(buffer, (bytes, bytearray)):
        if bytes(buffer[:3]) == JPEG_MAGIC:
            return bytes(buffer)
        buffer = decode_image(bytes(buffer))

    image = buffer if buffer.mode == "RGB" else buffer.convert("RGB")
    output = io.BytesIO()
    image.save(output, format="JPEG", quality=max(1, min(100, int(quality))))
    return output.getvalue()


def decode_image(data: bytes) -> Any:
    """
    Decode encoded image bytes, honoring EXIF orientation.

    Raises:
        AssetError: If the bytes are not a readable image
    """
    if not isinstance(data, (bytes, bytearray)) or not data:
        raise AssetError(f"Expected encoded image bytes, got {type(data).__name__}")
    try:
        with Image.open(io.BytesIO(data)) as opened:
            opened.load()
            image = ImageOps.exif_transpose(opened)
            return image.convert("RGB")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise AssetError(f"Cannot decode image: {e}") from e


def render_output(source: Any, state: EditState, config: Optional[CompositorConfig] = None) -> bytes:
    """Preview, crop and encode in one step."""
    config = config or CompositorConfig()
    frame = preview_frame(source, state, config)
    return finalize(apply_crop(frame, state.crop_aspect, config), config.jpeg_quality)
