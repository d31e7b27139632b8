# mdmake: markdown directory to static HTML site
from .config import SiteConfig, resolve_config
from .builder import BuildResult, build_file, build_site, compile_path
from .converter import Page, extract_title, rewrite_md_links, transform
from .watcher import ChangeMonitor, watch

__all__ = [
    "SiteConfig",
    "resolve_config",
    "BuildResult",
    "build_file",
    "build_site",
    "compile_path",
    "Page",
    "extract_title",
    "rewrite_md_links",
    "transform",
    "ChangeMonitor",
    "watch",
]
