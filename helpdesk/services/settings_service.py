from __future__ import annotations

from loguru import logger
from nanoid import generate

from helpdesk.schemas import (
    AppSettings,
    CustomField,
    CustomFieldCreate,
    EmailConfig,
    NotificationPreferences,
)
from helpdesk.schemas.settings import check_theme_color
from helpdesk.services.repositories import SettingsRepository

FIELD_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
FIELD_ID_SIZE = 9


class ConfigService:
    """
    Read/replace access to the settings singleton.

    The first ``get`` loads from the repository and the value is reused for the
    lifetime of this instance; the API builds one instance per request. There
    is no field-level patch: every helper copies the current record, changes
    the copy and hands the whole object to ``replace``.
    """

    def __init__(self, repository: SettingsRepository) -> None:
        self.repository = repository
        self._cached: AppSettings | None = None

    def get(self) -> AppSettings:
        if self._cached is None:
            self._cached = self.repository.get()
        return self._cached.model_copy(deep=True)

    def replace(self, settings: AppSettings) -> AppSettings:
        validated = AppSettings.model_validate(settings.model_dump())
        self.repository.save(validated)
        self._cached = validated
        return validated.model_copy(deep=True)

    def add_category(self, name: str) -> AppSettings:
        name = name.strip()
        if not name:
            raise ValueError("Category name is required")
        settings = self.get()
        if name in settings.categories:
            raise ValueError(f"Category '{name}' already exists")
        settings.categories.append(name)
        logger.info("Adding category {name}", name=name)
        return self.replace(settings)

    def remove_category(self, name: str) -> AppSettings:
        settings = self.get()
        if name not in settings.categories:
            raise ValueError(f"Unknown category '{name}'")
        settings.categories = [category for category in settings.categories if category != name]
        logger.info("Removing category {name}", name=name)
        return self.replace(settings)

    def add_custom_field(self, payload: CustomFieldCreate) -> CustomField:
        settings = self.get()
        field = CustomField(
            id=generate(FIELD_ID_ALPHABET, FIELD_ID_SIZE),
            label=payload.label,
            type=payload.type,
            options=payload.options,
            required=payload.required,
        )
        settings.custom_fields.append(field)
        self.replace(settings)
        logger.info("Added custom field id={field_id} type={field_type}", field_id=field.id, field_type=field.type.value)
        return field

    def remove_custom_field(self, field_id: str) -> AppSettings:
        settings = self.get()
        remaining = [field for field in settings.custom_fields if field.id != field_id]
        if len(remaining) == len(settings.custom_fields):
            raise ValueError(f"Unknown custom field '{field_id}'")
        # tickets keep any answers stored under this id
        settings.custom_fields = remaining
        logger.info("Removed custom field id={field_id}", field_id=field_id)
        return self.replace(settings)

    def update_notifications(self, preferences: NotificationPreferences) -> AppSettings:
        settings = self.get()
        settings.notifications = preferences.model_copy()
        return self.replace(settings)

    def update_email_config(self, config: EmailConfig) -> AppSettings:
        settings = self.get()
        settings.email_config = config.model_copy()
        return self.replace(settings)

    def set_theme_color(self, color: str) -> AppSettings:
        settings = self.get()
        settings.theme_color = check_theme_color(color)
        return self.replace(settings)
