"""Static file server CLI used to serve the site under test."""

import logging
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import typer
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from counter_e2e.config import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)

DEFAULT_SITE_ROOT = Path(__file__).parent / "static"


def readiness_line(root: Path, host: str, port: int) -> str:
    """The first line `serve` writes to stdout; callers wait for it before connecting."""
    return f'Serving "{root}" at http://{host}:{port}'


def create_app(root: Path) -> FastAPI:
    """Build an app serving every file under ``root``, with ``/`` mapped to ``index.html``."""
    app = FastAPI(
        title="Counter E2E static server",
        description="Serves a static site for browser tests",
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler that logs full stack traces."""
        logger.error(
            f"Unhandled exception in {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": f"Internal server error: {str(exc)}",
                "type": type(exc).__name__,
            },
        )

    # Mounted last so it does not shadow anything registered above.
    app.mount("/", StaticFiles(directory=str(root), html=True), name="site")
    return app


# https://github.com/fastapi/typer/issues/341
typer.main.get_command_name = lambda name: name

cli = typer.Typer(
    name="counter-e2e",
    help="Counter E2E - serve a static site for browser tests",
    add_completion=False,
)


@cli.callback()
def main_callback(ctx: typer.Context) -> None:
    """Counter E2E - serve a static site for browser tests."""
    pass


@cli.command()
def serve(
    port: int = typer.Option(DEFAULT_PORT, help="Port to serve on"),
    host: str = typer.Option(DEFAULT_HOST, help="Host to bind to"),
    root: Optional[Path] = typer.Option(
        None,
        help="Directory to serve (defaults to the bundled counter page)",
    ),
    no_browser: bool = typer.Option(
        False, "--no-browser", help="Accepted for live-server compatibility; no browser is ever opened"
    ),
) -> None:
    """Serve a directory of static files."""
    site_root = root if root is not None else DEFAULT_SITE_ROOT
    if not site_root.is_dir():
        typer.echo(f"Error: site root '{site_root}' is not a directory.", err=True)
        raise typer.Exit(1)
    site_root = site_root.resolve()

    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s %(pathname)s:%(lineno)d %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    def signal_handler(signum: int, frame: Any) -> None:
        """Handle shutdown signals gracefully."""
        typer.echo(f"Shutting down static server {signal.Signals(signum).name=}...")
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    typer.echo(readiness_line(site_root, host, port))
    if no_browser:
        logger.info("--no-browser given; nothing to open")

    uvicorn.run(
        create_app(site_root),
        host=host,
        port=port,
        log_level="info",
        timeout_graceful_shutdown=2,
        timeout_keep_alive=1,
    )


def main() -> None:
    """Entry point for the CLI application."""
    cli()


if __name__ == "__main__":
    main()
