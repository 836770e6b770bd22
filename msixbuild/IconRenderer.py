"""
MSIX icon resources.

Renders the fixed PNG set referenced by the manifest template from a single
raster source image:

    resources/
    ├── icon_44.png    # Square44x44Logo (taskbar, app list)
    ├── icon_50.png    # Package logo (Store listing)
    └── icon_150.png   # Square150x150Logo (medium tile)

Output sizes and names are not configurable so the manifest references never
drift from the rendered files. The source should be square; other aspect
ratios are center-cropped.
"""
import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable

from PIL import Image, UnidentifiedImageError

from msixbuild.errors import ConfigurationError
from msixbuild.types import ICON_SIZES, icon_file_name

logger = logging.getLogger(__name__)


def crop_to_square(source_img: Image.Image) -> Image.Image:
    """
    Center-crops an image to a square.

    Args:
        source_img: Source PIL Image

    Returns:
        Square PIL Image
    """
    width, height = source_img.size
    if width == height:
        return source_img

    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return source_img.crop((left, top, left + side, top + side))


def render_icons(source_path: Path, output_dir: Path, sizes: Iterable[int] = ICON_SIZES) -> Dict[int, Path]:
    """
    Renders every icon size into output_dir, replacing its previous content.

    Args:
        source_path: Raster source image (PNG, JPEG, ...)
        output_dir: Resources directory inside the app directory
        sizes: Square icon edge lengths in pixels

    Returns:
        Dictionary mapping icon size to written file

    Raises:
        ConfigurationError: If the source is missing or not a raster image
    """
    if not source_path.is_file():
        raise ConfigurationError(f"Icon source image not found at {source_path}")

    try:
        with Image.open(source_path) as opened:
            source_img = crop_to_square(opened.convert("RGBA"))
    except UnidentifiedImageError as e:
        raise ConfigurationError(
            f"Icon source {source_path} is not a raster image. "
            f"Rasterize SVG icons to PNG before packaging."
        ) from e

    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True)

    rendered = {}
    for size in sizes:
        target = output_dir / icon_file_name(size)
        icon = source_img.resize((size, size), Image.Resampling.LANCZOS)
        icon.save(target, "PNG", optimize=True)
        rendered[size] = target
        logger.debug(f"Rendered {target.name} ({size}x{size})")

    logger.info(f"Rendered PNG resources in {output_dir}")
    return rendered


def verify_icons(output_dir: Path, sizes: Iterable[int] = ICON_SIZES) -> bool:
    """
    Checks that every icon exists with the expected dimensions.

    Returns:
        True if all icons are valid, False otherwise
    """
    all_valid = True

    for size in sizes:
        icon_path = output_dir / icon_file_name(size)

        if not icon_path.is_file():
            logger.error(f"{icon_path.name}: missing")
            all_valid = False
            continue

        with Image.open(icon_path) as img:
            if img.size != (size, size):
                logger.error(f"{icon_path.name}: wrong size {img.size[0]}x{img.size[1]}, expected {size}x{size}")
                all_valid = False

    return all_valid
