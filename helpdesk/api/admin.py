from __future__ import annotations

from fastapi import APIRouter, Depends, status

from helpdesk.api.deps import get_config_service, get_repositories, require_admin, service_errors
from helpdesk.schemas import (
    AppSettings,
    CategoryCreate,
    CustomField,
    CustomFieldCreate,
    EmailConfig,
    NotificationPreferences,
    ThemeUpdate,
    UserCreate,
    UserPublic,
)
from helpdesk.services.auth import create_user
from helpdesk.services.repositories import Repositories
from helpdesk.services.settings_service import ConfigService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/settings", response_model=AppSettings)
def read_settings(config: ConfigService = Depends(get_config_service)) -> AppSettings:
    return config.get()


@router.put("/settings", response_model=AppSettings)
def replace_settings(payload: AppSettings, config: ConfigService = Depends(get_config_service)) -> AppSettings:
    with service_errors("replace_settings"):
        return config.replace(payload)


@router.post("/settings/categories", response_model=AppSettings, status_code=status.HTTP_201_CREATED)
def add_category(payload: CategoryCreate, config: ConfigService = Depends(get_config_service)) -> AppSettings:
    with service_errors("add_category"):
        return config.add_category(payload.name)


@router.delete("/settings/categories/{name:path}", response_model=AppSettings)
def remove_category(name: str, config: ConfigService = Depends(get_config_service)) -> AppSettings:
    with service_errors("remove_category"):
        return config.remove_category(name)


@router.post("/settings/fields", response_model=CustomField, status_code=status.HTTP_201_CREATED)
def add_field(payload: CustomFieldCreate, config: ConfigService = Depends(get_config_service)) -> CustomField:
    with service_errors("add_field"):
        return config.add_custom_field(payload)


@router.delete("/settings/fields/{field_id}", response_model=AppSettings)
def remove_field(field_id: str, config: ConfigService = Depends(get_config_service)) -> AppSettings:
    with service_errors("remove_field"):
        return config.remove_custom_field(field_id)


@router.put("/settings/notifications", response_model=AppSettings)
def update_notifications(
    payload: NotificationPreferences,
    config: ConfigService = Depends(get_config_service),
) -> AppSettings:
    with service_errors("update_notifications"):
        return config.update_notifications(payload)


@router.put("/settings/email", response_model=AppSettings)
def update_email(payload: EmailConfig, config: ConfigService = Depends(get_config_service)) -> AppSettings:
    with service_errors("update_email"):
        return config.update_email_config(payload)


@router.put("/settings/theme", response_model=AppSettings)
def update_theme(payload: ThemeUpdate, config: ConfigService = Depends(get_config_service)) -> AppSettings:
    with service_errors("update_theme"):
        return config.set_theme_color(payload.theme_color)


@router.get("/users", response_model=list[UserPublic])
def list_users(repos: Repositories = Depends(get_repositories)) -> list[UserPublic]:
    return [user.public() for user in repos.users.list()]


@router.post("/users", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def add_user(payload: UserCreate, repos: Repositories = Depends(get_repositories)) -> UserPublic:
    with service_errors("add_user"):
        return create_user(repos.users, payload).public()
