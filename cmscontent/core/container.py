from sqlalchemy.orm import Session

from cmscontent.core.settings import get_settings
from cmscontent.domain.field_registry import FieldRegistry
from cmscontent.domain.fieldtypes import FieldTypeContext
from cmscontent.domain.i18n import LocaleProvider
from cmscontent.infra.repo.content_schema import ContentTableManager
from cmscontent.infra.repo.content_store import SqlContentStore
from cmscontent.infra.repo.db import get_engine, session_scope
from cmscontent.infra.repo.element_repo import ElementRepo, RelationsRepo
from cmscontent.services.content_service import ContentService
from cmscontent.services.element_service import ElementsService


class Container:
    def __init__(self, settings=None, registry: FieldRegistry | None = None):
        self.settings = settings or get_settings()
        self.engine = get_engine(self.settings.DATABASE_URL)
        if registry is not None:
            self.fields = registry
        elif self.settings.FIELDS_FILE:
            self.fields = FieldRegistry.load_from_file(self.settings.FIELDS_FILE)
        else:
            self.fields = FieldRegistry()
        self.i18n = LocaleProvider.from_settings(self.settings)
        self.schema = ContentTableManager(self.engine, self.fields)

    def session_scope(self):
        """Session transactionnelle (commit/rollback automatiques)."""
        return session_scope(self.engine)

    def content_service(self, session: Session) -> ContentService:
        """Construit un ContentService lié à `session`."""
        return ContentService(
            self.fields,
            SqlContentStore(session, self.schema.table),
            self.i18n,
            FieldTypeContext(relations=RelationsRepo(session)),
        )

    def elements_service(self, session: Session) -> ElementsService:
        return ElementsService(ElementRepo(session), self.content_service(session))


container = Container()
"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur SQL, registre de champs, locales, schéma de
contenu) et expose un singleton `container`; les services liés à une session sont construits à
la demande.
"""
