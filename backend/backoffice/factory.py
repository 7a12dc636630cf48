"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from backoffice.core.config import BaseConfig, get_config
from backoffice.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object or import path; defaults to the class
        selected by ``APP_ENV``.
    :raises RuntimeError: When JWT secrets are missing, shared, or (outside
        debug/testing) still placeholders.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from backoffice.core import proxy

    proxy.init_app(app)

    from backoffice.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from backoffice.core import cors

    cors.init_app(app)

    from backoffice.core import auth

    auth.init_app(app)

    from backoffice.api import init_app as init_api

    init_api(app)

    from backoffice.core import errors

    errors.init_app(app)

    from backoffice import cli as app_cli

    app_cli.init_app(app)

    return app
