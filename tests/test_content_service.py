# ============================================================
# Tests : tests/test_content_service.py
# Objet  : Lecture, population, écriture et propagation multi-locales des contenus.
# ============================================================

from __future__ import annotations

from unittest.mock import Mock

import pytest

from cmscontent.core.errors import ContentConflictError, PropagationError, UnsavedElementError
from cmscontent.domain.entities import Element, Field
from cmscontent.domain.i18n import LocaleProvider
from cmscontent.infra.repo.content_store import SqlContentStore
from cmscontent.services.content_service import ContentService
from tests.fakes import RecordingText, default_registry, layout_for


def test_get_content_returns_row_for_locale_or_none(env) -> None:
    """Retourne la ligne exacte de (élément, locale), None pour une paire inexistante."""
    element_id = env.add_element()
    en_id = env.add_content(element_id, "en", title="Hi", body="Body")
    fr_id = env.add_content(element_id, "fr", title="Hi", body="Corps")

    en = env.service.get_content(element_id, "en")
    fr = env.service.get_content(element_id, "fr")
    assert en is not None and en.id == en_id and en.get_value("body") == "Body"
    assert fr is not None and fr.id == fr_id and fr.get_value("body") == "Corps"
    assert env.service.get_content(element_id, "de") is None
    assert env.service.get_content(element_id + 100, "en") is None


def test_get_content_rejects_non_positive_id(env) -> None:
    with pytest.raises(ValueError):
        env.service.get_content(0)


def test_populate_unsaved_element_defaults_to_primary_locale(registry) -> None:
    """Sans id, aucune lecture du dépôt et la locale par défaut est la locale principale."""
    store = Mock(spec=SqlContentStore)
    service = ContentService(registry, store, LocaleProvider("en", ["fr"]))
    element = Element(field_input={"title": "Hello"})

    content = service.populate_content_from_input(element, layout_for(registry, ["title"]))

    assert content.id is None
    assert content.element_id is None
    assert content.locale == "en"
    assert content.get_value("title") == "Hello"
    assert store.method_calls == []


def test_populate_never_reuses_another_locale_row(env) -> None:
    element_id = env.add_element()
    env.add_content(element_id, "fr", title="Salut", body="Bonjour")
    element = Element(id=element_id, field_input={"title": "Hello"})

    content = env.service.populate_content_from_input(
        element, layout_for(env.registry, ["title", "body"])
    )

    assert content.id is None
    assert content.locale == "en"
    assert content.get_value("title") == "Hello"


def test_populate_sets_layout_required_fields(env) -> None:
    layout = layout_for(env.registry, ["title", "body"], required=("title",))
    content = env.service.populate_content_from_input(Element(), layout)
    assert content.required_fields == ["title"]

    other = layout_for(env.registry, ["title", "body"], required=("body",))
    content = env.service.populate_content_from_input(Element(), other)
    assert content.required_fields == ["body"]


def test_populate_only_touches_layout_fields(env) -> None:
    """Les champs hors mise en page gardent leur valeur chargée."""
    element_id = env.add_element()
    env.add_content(element_id, "en", title="Old", body="Old body", summary="keep")
    element = Element(
        id=element_id, field_input={"title": "New", "summary": "overwritten?"}
    )

    content = env.service.populate_content_from_input(
        element, layout_for(env.registry, ["title", "body"]), "en"
    )

    assert content.get_value("title") == "New"
    assert content.get_value("body") == "Old body"
    assert content.get_value("summary") == "keep"


def test_save_then_get_round_trip(env) -> None:
    element_id = env.add_element()
    element = Element(id=element_id, field_input={"title": "Hello", "body": "World"})
    layout = layout_for(env.registry, ["title", "body"])

    content = env.service.populate_content_from_input(element, layout, "en")
    assert env.service.save_content(content) is True
    assert content.id is not None

    loaded = env.service.get_content(element_id, "en")
    assert loaded is not None
    assert loaded.id == content.id
    assert loaded.get_value("title") == "Hello"
    assert loaded.get_value("body") == "World"


def test_save_twice_updates_instead_of_duplicating(env) -> None:
    element_id = env.add_element()
    element = Element(id=element_id, field_input={"title": "v1"})
    content = env.service.populate_content_from_input(
        element, layout_for(env.registry, ["title"]), "en"
    )
    assert env.service.save_content(content)
    first_id = content.id

    content.set_value("title", "v2")
    assert env.service.save_content(content)

    assert content.id == first_id
    assert content.revision == 1
    assert env.count_content(element_id) == 1
    assert env.service.get_content(element_id, "en").get_value("title") == "v2"


def test_required_field_blocks_write(env) -> None:
    element_id = env.add_element()
    element = Element(id=element_id, field_input={"title": "  ", "body": "text"})
    layout = layout_for(env.registry, ["title", "body"], required=("title",))

    content = env.service.populate_content_from_input(element, layout, "en")
    assert env.service.save_content(content, validate=True) is False
    assert "title" in content.get_errors()
    assert env.count_content() == 0


def test_save_element_content_copies_errors_to_element(env) -> None:
    element_id = env.add_element()
    element = Element(id=element_id, field_input={"body": "text"})
    layout = layout_for(env.registry, ["title", "body"], required=("title",))

    assert env.service.save_element_content(element, layout, "en") is False
    assert element.errors["title"] == ["title cannot be blank."]
    assert env.count_content() == 0


def test_unsaved_element_fails_before_store_access(registry) -> None:
    store = Mock(spec=SqlContentStore)
    service = ContentService(registry, store, LocaleProvider("en", ["fr"]))
    element = Element(field_input={"title": "Hello"})

    with pytest.raises(UnsavedElementError):
        service.save_element_content(element, layout_for(registry, ["title"]))
    assert store.method_calls == []


def test_non_translatable_values_propagate_to_other_locales(env) -> None:
    """Élément 42: title non traduisible recopié en fr, body traduisible inchangé."""
    env.add_element(42)
    env.add_content(42, "fr", title="", body="Bonjour")
    element = Element(id=42, field_input={"title": "Hello", "body": "World"})
    layout = layout_for(env.registry, ["title", "body"], required=("title",))

    assert env.service.save_element_content(element, layout, "en") is True

    en = env.service.get_content(42, "en")
    fr = env.service.get_content(42, "fr")
    assert en.get_value("title") == "Hello" and en.get_value("body") == "World"
    assert fr.get_value("title") == "Hello"
    assert fr.get_value("body") == "Bonjour"
    assert fr.revision == 1


def test_propagation_is_noop_without_localization(make_env) -> None:
    env = make_env(i18n=LocaleProvider("en", ["fr"], localization_enabled=False))
    element_id = env.add_element()
    env.add_content(element_id, "fr", title="", body="Bonjour")
    element = Element(id=element_id, field_input={"title": "Hello"})

    assert env.service.save_element_content(element, layout_for(env.registry, ["title"]), "en")

    assert env.service.get_content(element_id, "fr").get_value("title") == ""


def test_propagation_failure_rolls_back_primary_save(env, monkeypatch) -> None:
    element_id = env.add_element()
    env.add_content(element_id, "fr", title="", body="Bonjour")
    env.add_content(element_id, "de", title="", body="Hallo")
    original = env.service.save_content

    def _flaky(content, validate=True):
        if content.locale == "fr":
            return False
        return original(content, validate)

    monkeypatch.setattr(env.service, "save_content", _flaky)
    element = Element(id=element_id, field_input={"title": "Hello"})

    with pytest.raises(PropagationError) as exc:
        env.service.save_element_content(element, layout_for(env.registry, ["title"]), "en")

    assert exc.value.failed_locales == ["fr"]
    assert exc.value.element_id == element_id
    monkeypatch.undo()
    assert env.service.get_content(element_id, "en") is None
    assert env.service.get_content(element_id, "de").get_value("title") == ""


def test_stale_revision_raises_conflict(env) -> None:
    element_id = env.add_element()
    env.add_content(element_id, "en", title="base")
    first = env.service.get_content(element_id, "en")
    second = env.service.get_content(element_id, "en")

    first.set_value("title", "first writer")
    assert env.service.save_content(first)

    second.set_value("title", "second writer")
    with pytest.raises(ContentConflictError) as exc:
        env.service.save_content(second)
    assert exc.value.retryable is True
    assert env.service.get_content(element_id, "en").get_value("title") == "first writer"


def test_update_of_missing_row_reports_failure(env) -> None:
    element_id = env.add_element()
    content = env.service.populate_content_from_input(
        Element(id=element_id, field_input={"title": "x"}),
        layout_for(env.registry, ["title"]),
        "en",
    )
    content.id = 999
    assert env.service.save_content(content) is False


def test_insert_failure_reports_failure(env) -> None:
    """Un élément inexistant (clé étrangère) fait échouer l'insertion sans exception."""
    content = env.service.populate_content_from_input(
        Element(field_input={"title": "orphan"}), layout_for(env.registry, ["title"]), "en"
    )
    content.element_id = 12345
    assert env.service.save_content(content) is False
    assert content.id is None
    assert env.count_content() == 0


def test_after_save_hooks_run_once_per_field(make_env) -> None:
    registry = default_registry(
        [Field(id=10, handle="teaser", type="recording_text", translatable=False)]
    )
    env = make_env(registry=registry)
    element_id = env.add_element()
    env.add_content(element_id, "fr", title="", body="")
    env.add_content(element_id, "de", title="", body="")
    RecordingText.calls.clear()

    element = Element(id=element_id, field_input={"title": "t", "teaser": "x"})
    assert env.service.save_element_content(
        element, layout_for(registry, ["title", "teaser"]), "en"
    )

    assert RecordingText.calls == ["teaser"]
    assert env.service.get_content(element_id, "de").get_value("teaser") == "x"


def test_new_locale_row_keeps_shared_values_of_other_locales(make_env) -> None:
    """Une première traduction reprend les champs non traduisibles au lieu de les effacer."""
    registry = default_registry(
        [Field(id=4, handle="sku", type="plain_text", translatable=False)]
    )
    env = make_env(registry=registry)
    element_id = env.add_element()
    env.add_content(element_id, "en", title="Hello", body="World", sku="SKU-1")
    element = Element(id=element_id, field_input={"body": "Bonjour"})

    assert env.service.save_element_content(element, layout_for(registry, ["body"]), "fr")

    en = env.service.get_content(element_id, "en")
    fr = env.service.get_content(element_id, "fr")
    assert (en.get_value("title"), en.get_value("sku"), en.get_value("body")) == (
        "Hello",
        "SKU-1",
        "World",
    )
    assert (fr.get_value("title"), fr.get_value("sku"), fr.get_value("body")) == (
        "Hello",
        "SKU-1",
        "Bonjour",
    )


def test_get_content_without_locale_matches_any_locale_when_not_localized(make_env) -> None:
    env = make_env(i18n=LocaleProvider("en", ["fr"], localization_enabled=False))
    element_id = env.add_element()
    fr_id = env.add_content(element_id, "fr", title="Salut")

    content = env.service.get_content(element_id)

    assert content is not None
    assert content.id == fr_id
    assert content.locale == "fr"


def test_populate_without_locale_uses_primary_row_when_localized(env) -> None:
    element_id = env.add_element()
    env.add_content(element_id, "fr", title="Salut", body="Bonjour")
    en_id = env.add_content(element_id, "en", title="Hello", body="World")
    element = Element(id=element_id, field_input={"body": "Updated"})

    content = env.service.populate_content_from_input(
        element, layout_for(env.registry, ["title", "body"])
    )

    assert content.id == en_id
    assert content.locale == "en"
    assert content.get_value("title") == "Hello"
    assert content.get_value("body") == "Updated"


def test_insert_leaves_commit_to_the_caller(env) -> None:
    element_id = env.add_element()
    content = env.service.populate_content_from_input(
        Element(id=element_id, field_input={"title": "draft"}),
        layout_for(env.registry, ["title"]),
        "en",
    )
    env.session.commit()

    assert env.service.save_content(content) is True
    assert env.session.in_transaction()
    env.session.rollback()

    assert env.service.get_content(element_id, "en") is None
