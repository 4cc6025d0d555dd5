# migrations/env.py
from __future__ import annotations
from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool

from payroll_api.wsgi import app as flask_app
from payroll_api.extensions import db

config = context.config

if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name, disable_existing_loggers=False)
    except (KeyError, ValueError):
        pass

with flask_app.app_context():
    db_uri = flask_app.config["SQLALCHEMY_DATABASE_URI"]
config.set_main_option("sqlalchemy.url", db_uri.replace("%", "%%"))


def _options(**kw) -> dict:
    # sqlite ALTERs go through batch mode
    return dict(
        target_metadata=db.metadata,
        compare_type=True,
        render_as_batch=db_uri.startswith("sqlite"),
        **kw,
    )


def migrate_offline() -> None:
    context.configure(**_options(url=config.get_main_option("sqlalchemy.url"), literal_binds=True))
    with context.begin_transaction():
        context.run_migrations()


def migrate_online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )
    with engine.connect() as connection, flask_app.app_context():
        context.configure(**_options(connection=connection))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
