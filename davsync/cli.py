"""CLI interface for davsync."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .api import WebDavClient
from .config import config
from .exceptions import ConfigError, DavSyncError
from .output import OutputFormatter
from .sync import DirectoryScanner, SyncEngine, SyncPair
from .utils import format_size, normalize_remote_path

logger = logging.getLogger(__name__)


def _make_client(ctx: Any, out: OutputFormatter) -> WebDavClient:
    """Create a WebDAV client from CLI options and configuration.

    Exits with status 1 if no server is configured.
    """
    try:
        return WebDavClient(
            server=ctx.obj["server"],
            username=ctx.obj["username"],
            password=ctx.obj["password"],
            timeout=ctx.obj["timeout"],
        )
    except ConfigError as e:
        out.error(str(e))
        ctx.exit(1)


def _report_failure(out: OutputFormatter, error: DavSyncError) -> None:
    out.error(f"{error.kind}: {error}")


@click.group()
@click.option("--server", "-s", envvar="DAVSYNC_SERVER", help="WebDAV server URL")
@click.option("--username", "-u", envvar="DAVSYNC_USERNAME", help="WebDAV username")
@click.option("--password", "-p", envvar="DAVSYNC_PASSWORD", help="WebDAV password")
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Request timeout in seconds (default: wait indefinitely)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: Any,
    server: Optional[str],
    username: Optional[str],
    password: Optional[str],
    timeout: Optional[float],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """davsync - Mirror a local directory onto a WebDAV server."""
    ctx.ensure_object(dict)
    ctx.obj["server"] = server
    ctx.obj["username"] = username
    ctx.obj["password"] = password
    ctx.obj["timeout"] = timeout
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("davsync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option("--server", "-s", prompt="WebDAV server URL", help="WebDAV server URL")
@click.option("--username", "-u", prompt="Username", default="", help="Username")
@click.option(
    "--password",
    "-p",
    prompt="Password",
    default="",
    hide_input=True,
    help="Password",
)
@click.pass_context
def init(ctx: Any, server: str, username: str, password: str) -> None:
    """Initialize davsync configuration.

    Stores the server URL and credentials in ~/.config/davsync/config.
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        out.info("Validating connection...")
        with WebDavClient(
            server=server, username=username, password=password
        ) as client:
            try:
                client.exists("/")
                out.success("✓ Connection is valid")
            except DavSyncError as e:
                out.error(f"Connection check failed: {e}")
                if not click.confirm("Save configuration anyway?", default=False):
                    out.warning("Configuration cancelled.")
                    ctx.exit(1)

        config.save_credentials(server, username or None, password or None)
        out.print_summary(
            "Initialization Complete",
            [
                ("Status", "✓ Configuration saved successfully"),
                ("Config file", str(config.get_config_path())),
            ],
        )
    except DavSyncError as e:
        out.error(f"Initialization failed: {e}")
        ctx.exit(1)


@main.command()
@click.pass_context
def status(ctx: Any) -> None:
    """Show the configured server and check the connection."""
    out: OutputFormatter = ctx.obj["out"]
    client = _make_client(ctx, out)

    with client:
        try:
            client.exists("/")
        except DavSyncError as e:
            _report_failure(out, e)
            ctx.exit(1)

    if out.json_output:
        out.print_json(
            {"server": client.server, "username": client.username, "ok": True}
        )
        return

    out.print_summary(
        "Connection",
        [
            ("Server", client.server or ""),
            ("Username", client.username or "(anonymous)"),
            ("Status", "✓ Connected"),
        ],
    )


@main.command()
@click.argument("local_dir", type=click.Path(path_type=Path))
@click.argument("remote_dir", type=str)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without changing the server",
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Disable the progress bar",
)
@click.option(
    "--exclude-dot-files",
    is_flag=True,
    help="Skip files and folders starting with a dot",
)
@click.pass_context
def sync(
    ctx: Any,
    local_dir: Path,
    remote_dir: str,
    dry_run: bool,
    no_progress: bool,
    exclude_dot_files: bool,
) -> None:
    """Mirror LOCAL_DIR onto REMOTE_DIR on the server.

    New local files are uploaded, files modified locally since their
    remote copy are overwritten, and remote files missing locally are
    deleted. The first error stops the run; nothing is rolled back.

    Examples:
        davsync sync ./public /www
        davsync sync ./public /www --dry-run
    """
    from .cli_progress import run_sync_with_progress

    out: OutputFormatter = ctx.obj["out"]
    pair = SyncPair(
        local=local_dir, remote=remote_dir, exclude_dot_files=exclude_dot_files
    )

    with _make_client(ctx, out) as client:
        if dry_run or no_progress or out.quiet or out.json_output:
            engine = SyncEngine(client, out)
            result = engine.sync_pair(pair, dry_run=dry_run)
        else:
            result = run_sync_with_progress(client, pair, out)

    logger.debug("Sync finished: success=%s stats=%s", result.success, result.stats)

    if out.json_output:
        data: dict[str, Any] = {
            "success": result.success,
            "dry_run": result.dry_run,
            "stats": result.stats,
        }
        if result.plan is not None:
            data["plan"] = {
                "add": [f.relative_path for f in result.plan.to_add],
                "update": [f.relative_path for f in result.plan.to_update],
                "delete": [f.relative_path for f in result.plan.to_delete],
            }
        if result.error is not None:
            data["error"] = {
                "kind": result.error.kind,
                "message": result.error.message,
                "path": result.error.path,
            }
        out.print_json(data)

    if not result.success:
        _report_failure(out, result.error)
        ctx.exit(1)


@main.command()
@click.argument("remote_dir", type=str, required=False, default="/")
@click.pass_context
def ls(ctx: Any, remote_dir: str) -> None:
    """List all files below REMOTE_DIR on the server (default: /)."""
    out: OutputFormatter = ctx.obj["out"]
    remote_dir = normalize_remote_path(remote_dir)

    with _make_client(ctx, out) as client:
        try:
            files = DirectoryScanner().scan_remote(client, remote_dir)
        except DavSyncError as e:
            _report_failure(out, e)
            ctx.exit(1)

    files.sort(key=lambda f: f.relative_path)

    if out.json_output:
        out.print_json(
            [
                {
                    "path": f.relative_path,
                    "remote_path": f.path,
                    "size": f.size,
                    "modified": f.mtime,
                }
                for f in files
            ]
        )
        return

    if not files:
        out.warning(f"No files found in {remote_dir}")
        return

    for f in files:
        modified = datetime.fromtimestamp(f.mtime).strftime("%Y-%m-%d %H:%M:%S")
        size = format_size(f.size) if f.size is not None else "-"
        out.print(f"{modified}  {size:>10}  {f.relative_path}")

    out.info("")
    out.info(f"{len(files)} file(s)")


if __name__ == "__main__":
    main()
