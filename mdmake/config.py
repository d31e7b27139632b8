"""Run configuration: command line values, settings file, and defaults."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional


STYLESHEET_NAME = "style.css"
DEFAULT_INPUT = "src"
DEFAULT_OUTPUT = "out"
DEFAULT_CONFIG_FILE = "mdmake.json"


@dataclass(frozen=True)
class SiteConfig:
    """Fully resolved settings for one run."""
    input_dir: Path
    output_dir: Path
    stylesheet: Optional[Path] = None
    header: Optional[str] = None
    footer: Optional[str] = None


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the optional JSON settings file.

    Args:
        path: Settings file. Defaults to ``mdmake.json`` in the working directory.

    Returns:
        Settings dict, or ``{}`` if the file is missing or not valid JSON.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    if config_path.is_file():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def read_text_file(path: Optional[Path]) -> Optional[str]:
    """Read a header/footer file; unreadable or missing files give None."""
    if path is None:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _optional_file(explicit: Optional[str], fallback: Path) -> Optional[Path]:
    if explicit:
        return Path(explicit)
    return fallback if fallback.is_file() else None


def resolve_config(
    input: Optional[str] = None,
    output: Optional[str] = None,
    style: Optional[str] = None,
    header: Optional[str] = None,
    footer: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> SiteConfig:
    """Build a SiteConfig from explicit values, then settings, then defaults.

    Args:
        input: Input root directory.
        output: Output root directory.
        style: Stylesheet file. Defaults to ``<input>/style.css`` if present.
        header: HTML file prepended to every body. Defaults to
            ``<input>/header.html`` if present.
        footer: HTML file appended to every body. Defaults to
            ``<input>/footer.html`` if present.
        settings: Values loaded by :func:`load_config_file`.

    Returns:
        Resolved configuration.
    """
    settings = settings or {}
    input_dir = Path(input or settings.get("input") or DEFAULT_INPUT)
    output_dir = Path(output or settings.get("output") or DEFAULT_OUTPUT)

    stylesheet = _optional_file(
        style or settings.get("style"), input_dir / STYLESHEET_NAME
    )
    header_file = _optional_file(
        header or settings.get("header"), input_dir / "header.html"
    )
    footer_file = _optional_file(
        footer or settings.get("footer"), input_dir / "footer.html"
    )

    return SiteConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        stylesheet=stylesheet,
        header=read_text_file(header_file),
        footer=read_text_file(footer_file),
    )


def preflight(config: SiteConfig) -> List[str]:
    """Return diagnostics about the input and output roots.

    These are reported but never stop the run.
    """
    problems = []
    if not config.input_dir.is_dir():
        problems.append(
            "specified input directory does not exist or is not a directory."
        )
    if config.output_dir.is_file():
        problems.append("specified output directory path is an existing file.")
    return problems
