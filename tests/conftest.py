"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `cmscontent` en ajoutant la racine du projet
au sys.path, et fournit une fabrique d'environnements isolés (SQLite en mémoire).
"""

import os
import sys

import pytest
import structlog

# Ensure project root is on sys.path so that
# imports like `from cmscontent...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tests.fakes import ContentEnv, build_env, default_registry  # noqa: E402


@pytest.fixture
def make_env():
    """Fabrique d'environnements; les sessions ouvertes sont fermées en fin de test."""
    envs: list[ContentEnv] = []

    def _make(**kwargs) -> ContentEnv:
        env = build_env(**kwargs)
        envs.append(env)
        return env

    yield _make
    for env in envs:
        env.session.close()
        env.engine.dispose()


@pytest.fixture
def env(make_env) -> ContentEnv:
    """Environnement par défaut: locales en/fr, champs title (non traduisible) et body."""
    return make_env()


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Rétablit la configuration structlog par défaut après chaque test."""
    yield
    structlog.reset_defaults()
