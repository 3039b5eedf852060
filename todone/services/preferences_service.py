"""Appearance preferences backed by the key/value settings store."""

import logging

from pydantic import ValidationError
from sqlmodel import Session

from ..config import AppearanceSettings
from ..core.events import ChangeNotifier, TaskEventType
from ..repositories import SettingsRepository
from ..schemas.models import AccentColor, AppearancePreferences, AppTheme


logger = logging.getLogger(__name__)

THEME_KEY = "appTheme"
ACCENT_COLOR_KEY = "accentColor"


class PreferencesService:
    """Loads the preferences object and applies explicit updates to it."""

    def __init__(
        self,
        session: Session,
        defaults: AppearanceSettings | None = None,
        notifier: ChangeNotifier | None = None,
    ):
        self.settings_repo = SettingsRepository(session)
        self.defaults = defaults or AppearanceSettings()
        self.notifier = notifier

    def load(self) -> AppearancePreferences:
        """Read stored preferences, falling back to defaults per key."""
        return AppearancePreferences(
            theme=self._read(THEME_KEY, "theme", self.defaults.default_theme),
            accent_color=self._read(
                ACCENT_COLOR_KEY, "accent_color", self.defaults.default_accent_color
            ),
        )

    def update(
        self,
        theme: AppTheme | str | None = None,
        accent_color: AccentColor | str | None = None,
    ) -> AppearancePreferences:
        """Validate and store the given preferences, then return the result.

        Raises:
            pydantic.ValidationError: If a value is not a known theme or colour.
            PersistenceError: If the settings could not be saved.

        """
        current = self.load()
        updated = AppearancePreferences(
            theme=theme if theme is not None else current.theme,
            accent_color=accent_color if accent_color is not None else current.accent_color,
        )
        if updated == current:
            return current

        self.settings_repo.set_value(THEME_KEY, updated.theme.value)
        self.settings_repo.set_value(ACCENT_COLOR_KEY, updated.accent_color.value)
        self.settings_repo.save("update preferences")

        logger.info(
            f"Preferences updated: theme={updated.theme.value}, "
            f"accent_color={updated.accent_color.value}"
        )
        if self.notifier is not None:
            self.notifier.publish(TaskEventType.PREFERENCES_CHANGED)
        return updated

    def _read(self, key: str, field: str, default):
        raw = self.settings_repo.get_value(key)
        if raw is None:
            return default
        try:
            AppearancePreferences.model_validate({field: raw})
        except ValidationError:
            logger.warning(f"Ignoring unknown {key} value {raw!r}")
            return default
        return raw
