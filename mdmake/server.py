"""Local preview server for a built site, using Flask."""

from pathlib import Path

from flask import Flask, abort, send_from_directory


def _page_links(static_dir: Path) -> str:
    pages = sorted(p.relative_to(static_dir).as_posix() for p in static_dir.rglob("*.html"))
    return "".join(f'<li><a href="/{page}">{page}</a></li>' for page in pages)


def create_app(static_dir: Path) -> Flask:
    """Create Flask app for serving a built site.

    Args:
        static_dir: Output root of a build.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    static_dir = Path(static_dir).resolve()

    @app.route("/")
    def index():
        """Serve index.html from root, or list the built pages."""
        if (static_dir / "index.html").is_file():
            return send_from_directory(static_dir, "index.html")
        links = _page_links(static_dir)
        if links:
            return f"<h1>Available Pages</h1><ul>{links}</ul>"
        return "<h1>No HTML files found</h1>", 404

    @app.route("/<path:filename>")
    def serve_file(filename):
        """Serve a file, trying ``.html`` and ``/index.html`` after it."""
        file_path = static_dir / filename

        # Security check: prevent path traversal
        try:
            file_path.resolve().relative_to(static_dir)
        except ValueError:
            abort(403)

        for candidate in (filename, f"{filename}.html", f"{filename.rstrip('/')}/index.html"):
            if (static_dir / candidate).is_file():
                return send_from_directory(static_dir, candidate)

        abort(404)

    return app


def serve_site(directory: Path, port: int = 8000) -> None:
    """Start preview server.

    Args:
        directory: Directory to serve.
        port: Port number to listen on.
    """
    app = create_app(directory)
    print(f"Serving {directory} at http://localhost:{port}")
    print("Press Ctrl+C to stop")
    app.run(host="127.0.0.1", port=port)
