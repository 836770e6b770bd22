# TemplateRenderer.py
"""
AppxManifest.xml rendering.

Replaces {{placeholder}} tokens in a manifest template. Templates are read and
written as raw UTF-8 bytes so line endings and any BOM survive unchanged.
"""
import logging
import re
from pathlib import Path
from typing import Optional

from msixbuild.errors import ManifestConfigurationError
from msixbuild.types import ManifestContext

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_NAME = "AppxManifest.template.xml"
TEMPLATES_DIR = Path(__file__).parent / "templates"

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def render(template: str, context: ManifestContext) -> str:
    """
    Fills a template with context values.

    Tokens without a matching context key are left untouched. Values are
    inserted literally, tokens inside a value are not expanded.

    Args:
        template: Template text containing {{name}} tokens
        context: Placeholder name -> value

    Returns:
        Rendered text
    """
    return PLACEHOLDER_PATTERN.sub(lambda match: context.get(match.group(1), match.group(0)), template)


def _read_template(template_file: Path) -> str:
    try:
        return template_file.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestConfigurationError(f"AppxManifest template at {template_file} could not be read: {e}") from e


def load_template(template_file: Optional[Path] = None, templates_dir: Path = TEMPLATES_DIR) -> str:
    """
    Loads the user template, or the bundled default when none is configured.

    Raises:
        ManifestConfigurationError: If the template cannot be read
    """
    if template_file is not None:
        if not template_file.is_file():
            raise ManifestConfigurationError(f"AppxManifest template not found at {template_file}")
        return _read_template(template_file)

    default_template = templates_dir / DEFAULT_TEMPLATE_NAME
    if not default_template.is_file():
        raise ManifestConfigurationError(f"Default AppxManifest template not found at {default_template}")

    return _read_template(default_template)


def write_manifest(output_file: Path, context: ManifestContext, template_file: Optional[Path] = None) -> Path:
    """
    Renders the manifest and replaces any previous output file.

    Args:
        output_file: Destination AppxManifest.xml
        context: Placeholder values
        template_file: Optional user template

    Returns:
        Path to the written manifest
    """
    manifest_xml = render(load_template(template_file), context)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    if output_file.exists():
        output_file.unlink()

    output_file.write_bytes(manifest_xml.encode("utf-8"))
    logger.info(f"Created AppxManifest.xml in {output_file}")

    return output_file
