"""
Configuration de l'environnement Alembic pour les migrations de base de données.

Les migrations gèrent les tables `elements`, `relations` et les colonnes de base de `content`.
Les colonnes de champs de `content` sont ajoutées à chaud par `ContentTableManager` et sont
ignorées par l'autogénération.
"""

from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import MetaData, create_engine, pool

from alembic import context  # type: ignore[attr-defined]

# Allow importing project modules when running via Alembic CLI
_root = Path(__file__).resolve().parent.parent
for p in (_root, Path.cwd()):
    s = str(p)
    if s not in sys.path:
        sys.path.append(s)

from cmscontent.domain.field_registry import FieldRegistry  # noqa: E402
from cmscontent.infra.repo.content_schema import CONTENT_TABLE, build_content_table  # noqa: E402
from cmscontent.infra.repo.models import Base  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Base tables + content table without field columns
target_metadata = MetaData()
for _table in Base.metadata.sorted_tables:
    _table.to_metadata(target_metadata)
build_content_table(FieldRegistry(), target_metadata)

DEFAULT_URL = "sqlite:///./cmscontent.db"


def include_object(obj, name, type_, reflected, compare_to):  # type: ignore[no-untyped-def]
    """Exclut de l'autogénération les colonnes de champs présentes en base uniquement."""
    if type_ == "column" and reflected and compare_to is None:
        return obj.table.name != CONTENT_TABLE
    return True


def run_migrations_offline() -> None:
    """Exécute les migrations en mode offline (SQL littéral, sans connexion)."""
    url = os.getenv("DATABASE_URL", DEFAULT_URL)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        include_object=include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Exécute les migrations avec une connexion active."""
    url = os.getenv("DATABASE_URL", DEFAULT_URL)
    connectable = create_engine(url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
