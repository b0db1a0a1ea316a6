# -*- coding: utf-8 -*-
"""Centralized Translation Manager for i18n support."""

from typing import Callable, List

from app.config import Config
from services.translations.ar import AR_TRANSLATIONS
from services.translations.en import EN_TRANSLATIONS
from utils.logger import get_logger

logger = get_logger(__name__)


class TranslationManager:
    """Singleton Translation Manager with RTL/LTR support."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._translations = {
                "ar": AR_TRANSLATIONS,
                "en": EN_TRANSLATIONS,
            }
            cls._instance._current_language = (
                Config.LANGUAGE if Config.LANGUAGE in cls._instance._translations else "en"
            )
            cls._instance._listeners: List[Callable] = []
        return cls._instance

    def on_language_changed(self, callback: Callable):
        self._listeners.append(callback)

    def set_language(self, lang_code: str):
        if lang_code not in self._translations:
            logger.warning(f"Unsupported language '{lang_code}', falling back to English")
            lang_code = "en"
        if self._current_language != lang_code:
            self._current_language = lang_code
            logger.info(f"Language changed to: {lang_code}")
            for callback in self._listeners:
                callback(lang_code)

    def get_language(self) -> str:
        return self._current_language

    def tr(self, key: str, **kwargs) -> str:
        translation = self._translations.get(
            self._current_language, {}
        ).get(key)
        if translation is None:
            return key
        if kwargs:
            try:
                translation = translation.format(**kwargs)
            except (KeyError, ValueError):
                logger.warning(f"Bad placeholders for translation key '{key}': {kwargs}")
        return translation

    def is_rtl(self) -> bool:
        return self._current_language in ("ar", "he", "fa")


_translator = TranslationManager()


def tr(key: str, **kwargs) -> str:
    return _translator.tr(key, **kwargs)


def set_language(lang_code: str):
    _translator.set_language(lang_code)


def get_language() -> str:
    return _translator.get_language()


def is_rtl() -> bool:
    return _translator.is_rtl()
