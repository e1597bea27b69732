"""Command-line entrypoint."""

from __future__ import annotations

import json
import logging
import threading
import webbrowser
from pathlib import Path

import typer
import uvicorn

from i18n_server.config import DEFAULT_CONFIG_FILENAME, load_settings
from i18n_server.logging import configure_logging, level_from_name, logger
from i18n_server.services.exceptions import ConfigError
from i18n_server.web.app import create_app

BROWSER_OPEN_DELAY_SECONDS = 1.0
INIT_LANGUAGES = ("zh", "en")
INIT_FILES = ("common",)

CONFIG_TEMPLATE = """\
# i18n-server configuration. CLI flags override these values;
# I18N_* environment variables (and .env) apply when a key is absent here.
host: localhost
port: 3001
locales_path: public/locales
static_path: public
auto_open_browser: true
default_source_language: zh
translation:
  model: qwen-plus
  request_delay_seconds: 1.0
  # api_url and api_key are read from I18N_TRANSLATION__API_URL / I18N_TRANSLATION__API_KEY
"""

ENV_TEMPLATE = """\
# Translation API configuration
I18N_TRANSLATION__API_URL=https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions
I18N_TRANSLATION__API_KEY=Bearer your_api_key_here
I18N_TRANSLATION__MODEL=qwen-plus
"""

app = typer.Typer(
    name="i18n-server",
    help="Translation management server for per-language JSON locale files.",
    add_completion=False,
)


def _open_browser(url: str) -> None:
    if webbrowser.open(url):
        logger.info("browser_opened", url=url)
    else:
        logger.warning("browser_open_failed", url=url)


@app.command()
def start(
    config: Path | None = typer.Option(None, "-c", "--config", help="Path to a YAML config file."),
    port: int | None = typer.Option(None, "-p", "--port", help="Server port."),
    host: str | None = typer.Option(None, "-h", "--host", help="Server host."),
    locales: Path | None = typer.Option(None, "-l", "--locales", help="Path to the locales folder."),
    browser: bool = typer.Option(True, "--browser/--no-browser", help="Open the web UI on start."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
) -> None:
    """Start the translation server."""

    level = level_from_name(log_level)
    configure_logging(level)
    overrides: dict[str, object] = {
        "port": port,
        "host": host,
        "locales_path": locales.resolve() if locales else None,
    }
    if not browser:
        overrides["auto_open_browser"] = False

    try:
        settings = load_settings(config, **overrides)
    except ConfigError as exc:
        logger.error("config_load_failed", error=str(exc))
        raise typer.Exit(code=1) from exc

    if not settings.locales_path.exists():
        logger.warning("locales_path_created", path=str(settings.locales_path))
        settings.locales_path.mkdir(parents=True, exist_ok=True)

    application = create_app(settings)
    url = f"http://{settings.host}:{settings.port}"
    logger.info("server_starting", url=url, locales_path=str(settings.locales_path))
    if settings.auto_open_browser:
        timer = threading.Timer(BROWSER_OPEN_DELAY_SECONDS, _open_browser, args=(url,))
        timer.daemon = True
        timer.start()

    # uvicorn accepts only canonical level names.
    uvicorn.run(
        application,
        host=settings.host,
        port=settings.port,
        log_level=logging.getLevelName(level).lower(),
    )


@app.command()
def init(
    directory: Path = typer.Option(Path("."), "-d", "--dir", help="Project directory."),
) -> None:
    """Scaffold a config file, a locales tree and a .env template."""

    configure_logging()
    project_dir = directory.resolve()
    project_dir.mkdir(parents=True, exist_ok=True)

    config_path = project_dir / DEFAULT_CONFIG_FILENAME
    if config_path.exists():
        logger.warning("init_config_exists", path=str(config_path))
    else:
        config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        logger.info("init_config_created", path=str(config_path))

    locales_dir = project_dir / "public" / "locales"
    for language in INIT_LANGUAGES:
        language_dir = locales_dir / language
        if language_dir.exists():
            continue
        language_dir.mkdir(parents=True)
        for file_name in INIT_FILES:
            (language_dir / f"{file_name}.json").write_text(json.dumps({}, indent=4), encoding="utf-8")
        logger.info("init_language_created", path=str(language_dir))

    env_path = project_dir / ".env"
    if env_path.exists():
        logger.warning("init_env_exists", path=str(env_path))
    else:
        env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
        logger.info("init_env_created", path=str(env_path))

    typer.echo(f"Initialized translation project in {project_dir}")
    typer.echo(f"Next: edit .env, then run: i18n-server start -c {DEFAULT_CONFIG_FILENAME}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
