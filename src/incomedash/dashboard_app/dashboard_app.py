"""Income dashboard app: standalone NiceGUI application.

Runs in native or web mode via env vars. Uses @ui.page("/") pattern.

Run:
    python -m incomedash.dashboard_app.dashboard_app

Env vars:
    INCOMEDASH_CSV: dataset path (default: csv_path from the user config, "adult.csv")
    INCOMEDASH_GUI_NATIVE: 1/0 (default 0)
    INCOMEDASH_GUI_RELOAD: 1/0 (default 0)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import os
from multiprocessing import freeze_support

from nicegui import ui

from incomedash.utils.gui_defaults import setUpGuiDefaults
from incomedash.utils.logging import configure_logging, get_logger
from incomedash.dashboard.dashboard_config import DashboardConfig
from incomedash.dashboard.figure_generator import FigureGenerator
from incomedash.dashboard_app import header
from incomedash.dashboard_app.chat_panel import ChatPanel
from incomedash.dashboard_app.dashboard_view import DashboardView

logger = get_logger(__name__)

APP_TITLE = "Income Analysis Dashboard"
CSV_ENV = "INCOMEDASH_CSV"
STORAGE_SECRET = "incomedash-session-secret"


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def resolve_csv_path(config: DashboardConfig) -> str:
    """INCOMEDASH_CSV wins over the csv_path stored in the user config."""
    raw = os.getenv(CSV_ENV)
    if raw is not None and raw.strip():
        return raw.strip()
    return config.data.csv_path


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
async def home() -> None:
    """Home page: header, KPIs and charts for one dataset, chat panel."""

    setUpGuiDefaults("text-sm")

    ui.page_title(APP_TITLE)

    config = DashboardConfig.load()
    view = DashboardView(resolve_csv_path(config), FigureGenerator(config.data))

    header.build_dashboard_header(title=APP_TITLE, on_reload=view.reload)
    view.build()
    ChatPanel().build()

    try:
        await view.reload()
    except Exception as e:
        logger.exception("Failed to build dashboard for %s: %s", view.csv_path, e)
        ui.notify(f"Failed to build dashboard: {e}", type="negative")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the dashboard application.

    Defaults (no env vars, no args):
      - native=False
      - reload=False
    """
    configure_logging()

    native_bool = _env_bool("INCOMEDASH_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("INCOMEDASH_GUI_RELOAD", False) if reload is None else reload

    if native_bool:
        from nicegui import native as native_module
        port = _env_int("PORT", native_module.find_open_port())
    else:
        port = _env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting income dashboard: port=%s reload=%s native=%s",
        port,
        reload,
        native_bool,
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "storage_secret": STORAGE_SECRET,
        "title": APP_TITLE,
    }
    if native_bool:
        run_kwargs["window_size"] = (1280, 900)
    ui.run(**run_kwargs)


if __name__ in {"__main__", "__mp_main__"}:
    freeze_support()
    main()
