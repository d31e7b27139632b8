"""Build static site from markdown files."""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .buildlog import BuildLog
from .config import STYLESHEET_NAME, SiteConfig
from .converter import transform
from .errors import MdmakeError, OutputWriteError, SourceReadError
from .page import assemble_page
from .walker import is_markdown, walk_dirs, walk_files


@dataclass
class BuildResult:
    pages: int = 0
    resources: int = 0


def relative_output_path(config: SiteConfig, input_path: Path) -> Path:
    """Output path of an input file, relative to the output root."""
    try:
        relative = Path(input_path).relative_to(config.input_dir)
    except ValueError as e:
        raise MdmakeError(
            "File is not within the input directory", input_path
        ) from e
    if is_markdown(relative):
        return relative.with_suffix(".html")
    return relative


def output_path_for(config: SiteConfig, input_path: Path) -> Path:
    return config.output_dir / relative_output_path(config, input_path)


def _ensure_parent(output_path: Path) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(
            f"Failed to create output subdirectory ({e.strerror})",
            output_path.parent,
        ) from e


def build_file(config: SiteConfig, input_path: Path) -> Path:
    """Build single markdown file to HTML.

    The output file is always rewritten in full. Nothing else in the output
    tree is touched.

    Args:
        config: Site configuration.
        input_path: Markdown file inside the input root.

    Returns:
        Path of the written HTML file.

    Raises:
        SourceReadError: The markdown file could not be read.
        ParseFailure: The markdown could not be parsed.
        OutputWriteError: The HTML file could not be written.
    """
    relative = relative_output_path(config, input_path)
    output_path = config.output_dir / relative

    try:
        markdown_content = Path(input_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Failed to read markdown file ({e})", input_path) from e

    try:
        page = transform(markdown_content)
    except MdmakeError as e:
        e.path = Path(input_path)
        raise
    full_html = assemble_page(page, relative, config)

    _ensure_parent(output_path)
    try:
        output_path.write_text(full_html, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(
            f"Failed to write HTML file ({e.strerror})", output_path
        ) from e
    return output_path


def copy_resource(config: SiteConfig, input_path: Path) -> Path:
    """Copy a non-markdown file byte for byte to its mirrored location."""
    output_path = output_path_for(config, input_path)
    _ensure_parent(output_path)
    try:
        shutil.copyfile(input_path, output_path)
    except OSError as e:
        raise OutputWriteError(
            f"Failed to copy resource file ({e.strerror})", output_path
        ) from e
    return output_path


def compile_path(config: SiteConfig, input_path: Path) -> Path:
    """Build a markdown file or copy any other file."""
    if is_markdown(Path(input_path)):
        return build_file(config, input_path)
    return copy_resource(config, input_path)


def copy_stylesheet(config: SiteConfig) -> Optional[Path]:
    """Copy the configured stylesheet into the output root, if it exists."""
    if config.stylesheet is None or not config.stylesheet.is_file():
        return None
    target = config.output_dir / STYLESHEET_NAME
    try:
        shutil.copyfile(config.stylesheet, target)
    except OSError as e:
        raise OutputWriteError(
            f"Failed to copy stylesheet ({e.strerror})", target
        ) from e
    return target


def clear_output(config: SiteConfig) -> None:
    """Remove the output root and recreate it empty."""
    output_dir = config.output_dir
    if output_dir.exists() and not output_dir.is_dir():
        raise OutputWriteError("Output path is an existing file", output_dir)
    try:
        if output_dir.is_dir():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
    except OSError as e:
        raise OutputWriteError(
            f"Failed to clear output directory ({e.strerror})", output_dir
        ) from e


def build_site(config: SiteConfig, log: Optional[BuildLog] = None) -> BuildResult:
    """Build entire site from the input directory.

    The output directory is wiped first, so files without a source
    counterpart disappear.

    Args:
        config: Site configuration.
        log: Where progress is reported. Defaults to stdout only.

    Returns:
        Number of pages built and resources copied.
    """
    log = log or BuildLog()
    result = BuildResult()

    clear_output(config)
    copy_stylesheet(config)

    try:
        directories = walk_dirs(config.input_dir)
        files = walk_files(config.input_dir)
    except OSError as e:
        raise SourceReadError(
            f"Failed to read input directory ({e.strerror})",
            Path(e.filename) if e.filename else config.input_dir,
        ) from e

    for directory in sorted(directories):
        mirrored = config.output_dir / directory.relative_to(config.input_dir)
        try:
            mirrored.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(
                f"Failed to create output subdirectory ({e.strerror})", mirrored
            ) from e

    for source_path in sorted(files):
        output_path = compile_path(config, source_path)
        relative_path = source_path.relative_to(config.input_dir)
        if is_markdown(source_path):
            result.pages += 1
            kind = "page"
        else:
            result.resources += 1
            kind = "resource"
        log.info(
            f"  {relative_path} -> {output_path.relative_to(config.output_dir)}",
            event=kind,
            source=str(source_path),
            output=str(output_path),
        )

    log.record({
        "event": "full_compile",
        "pages": result.pages,
        "resources": result.resources,
    })
    return result
