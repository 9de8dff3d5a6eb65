"""
Built-in template library.

Templates ship as .jinja files next to this module; user templates are
plain files loaded by path.
"""

from dataclasses import dataclass
from pathlib import Path

from tostringgen.config.loader import ConfigurationError

TEMPLATE_DIR = Path(__file__).parent / "builtin"
TEMPLATE_SUFFIX = ".jinja"
DEFAULT_TEMPLATE = "concat"

BUILTIN_TEMPLATES = {
    "concat": "String concatenation (+)",
    "string_builder": "StringBuilder with javadoc",
    "tostring_builder": "Apache commons-lang ToStringBuilder",
}


@dataclass(frozen=True)
class TemplateInfo:
    name: str
    description: str
    path: Path


def list_templates() -> list[TemplateInfo]:
    return [
        TemplateInfo(name, description, TEMPLATE_DIR / f"{name}{TEMPLATE_SUFFIX}")
        for name, description in BUILTIN_TEMPLATES.items()
    ]


def get_template(name: str) -> str:
    """Return the source of a built-in template."""
    if name not in BUILTIN_TEMPLATES:
        raise ConfigurationError(
            f"Unknown template '{name}'. Available: {', '.join(BUILTIN_TEMPLATES)}"
        )
    return load_template_file(TEMPLATE_DIR / f"{name}{TEMPLATE_SUFFIX}")


def load_template_file(path: Path) -> str:
    if not path.exists():
        raise ConfigurationError(f"Template file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return f.read()
