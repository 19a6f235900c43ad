"""Command-line entry point: ``python -m pill_reserves [CONFIGPATH.toml]``."""

import logging
import sys

import uvicorn

from pill_reserves.api.app import create_app
from pill_reserves.app_logging import configure_logging
from pill_reserves.config import ConfigError, load_settings, parse_listen_addr
from pill_reserves.containers import build_container

DEFAULT_CONFIG_PATH = "config.toml"

logger = logging.getLogger("pill_reserves.main")


def main(argv: list[str] | None = None) -> int:
    """Load the configuration and serve the app until interrupted."""
    args = sys.argv if argv is None else argv
    if len(args) > 2:  # noqa: PLR2004
        print(f"Usage: {args[0]} [CONFIGPATH.toml]", file=sys.stderr)
        return 1
    config_path = args[1] if len(args) > 1 else DEFAULT_CONFIG_PATH

    configure_logging()
    try:
        settings = load_settings(config_path)
        host, port = parse_listen_addr(settings.listen_addr)
    except (ConfigError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    app = create_app(build_container(settings))
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
