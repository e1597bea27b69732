from i18n_server.locales.cache import TranslationCache
from i18n_server.locales.scanner import scan_locales_directory

__all__ = ["TranslationCache", "scan_locales_directory"]
