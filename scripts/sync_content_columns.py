"""
Script de synchronisation des colonnes de la table `content`.

Ce script lit un fichier JSON de définitions de champs et ajoute à la table `content` les
colonnes manquantes (une par champ qui en définit une). Les tables de base sont créées si
besoin.

Format attendu du JSON: liste [{"id": int, "handle": str, "type": str, ...}]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Permet l'exécution du script en direct (python scripts/sync_content_columns.py)
SYS_ROOT = Path(__file__).resolve().parents[1]
if str(SYS_ROOT) not in sys.path:
    sys.path.append(str(SYS_ROOT))

from cmscontent.core.errors import FieldDefinitionError  # noqa: E402
from cmscontent.core.logging import setup_logging  # noqa: E402
from cmscontent.core.settings import get_settings  # noqa: E402
from cmscontent.domain.field_registry import FieldRegistry  # noqa: E402
from cmscontent.infra.repo.content_schema import ContentTableManager  # noqa: E402
from cmscontent.infra.repo.db import get_engine  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    """Point d'entrée: charge les champs et synchronise le schéma. Retourne le code de sortie."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Ajoute les colonnes de champs manquantes à la table content"
    )
    parser.add_argument(
        "--fields",
        type=str,
        default=settings.FIELDS_FILE,
        help="Chemin du fichier JSON de définitions de champs",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=settings.DATABASE_URL,
        help="URL SQLAlchemy de la base (défaut: DATABASE_URL)",
    )
    args = parser.parse_args(argv)

    if not args.fields or not Path(args.fields).exists():
        print(f"[sync] fichier de champs introuvable: {args.fields}")
        return 1
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    try:
        registry = FieldRegistry.load_from_file(args.fields)
    except FieldDefinitionError as err:
        print(f"[sync] définitions invalides: {err}")
        return 1

    manager = ContentTableManager(get_engine(args.database_url), registry)
    manager.create_all()
    print(f"[sync] {len(registry.content_columns())} colonnes de champs dans content")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
