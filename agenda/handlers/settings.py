"""
Settings module command handlers
User preferences and localized string tables
"""

from typing import Any, Dict

from agenda.core.i18n import get_translator
from agenda.core.logger import get_logger
from agenda.core.settings import get_settings
from agenda.models.requests import GetTranslationsRequest, UpdateSettingRequest

from . import api_handler, error_response, ok_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/settings/get",
    tags=["settings"],
    summary="Get settings",
    description="Get theme, language and notifications preferences",
)
async def get_settings_info() -> Dict[str, Any]:
    """Get settings

    @returns theme, language and notifications values
    """
    try:
        return ok_response(get_settings().get_all())
    except Exception as e:
        return error_response("Failed to get settings", e)


@api_handler(
    body=UpdateSettingRequest,
    method="POST",
    path="/settings/update",
    tags=["settings"],
    summary="Update setting",
)
async def update_setting(body: UpdateSettingRequest) -> Dict[str, Any]:
    """Overwrite a single setting

    Turning notifications off stops the reminder timer, turning them on
    starts it again.
    """
    try:
        result = get_settings().update(body.key, body.value)
        return ok_response(result, message="Setting updated")
    except Exception as e:
        return error_response("Failed to update setting", e)


@api_handler(
    body=GetTranslationsRequest,
    method="POST",
    path="/i18n/translations",
    tags=["i18n"],
    summary="Get translations",
    description="Get the string table, month and weekday names for a language",
)
async def get_translations(body: GetTranslationsRequest) -> Dict[str, Any]:
    """Get translations

    @param body - Language, the language setting when omitted
    """
    try:
        language = body.language or get_settings().get_language()
        translator = get_translator(language)
        return ok_response(
            {
                "language": translator.language,
                "strings": translator.strings(),
                "months": [translator.month_name(month) for month in range(1, 13)],
                "weekdays": translator.weekday_names(),
                "weekdaysShort": translator.weekday_names(short=True),
            }
        )
    except Exception as e:
        return error_response("Failed to get translations", e)
