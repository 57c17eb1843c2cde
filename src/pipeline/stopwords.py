"""
Stopword lists keyed by language code.

A list is a UTF-8 text file named ``<lang>.txt`` with one word per line.
Blank lines and lines starting with ``#`` are ignored. A language without a
file has an empty stopword set; that is not an error.

Each language is read at most once per store and then cached for the life
of the process. The cache is never invalidated.
"""

import threading
from functools import lru_cache
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

BUNDLED_STOPWORDS_DIR = Path(__file__).parent / "data" / "stopwords"

LANGUAGE_ALIASES = {
    "english": "en",
    "spanish": "es",
    "espanol": "es",
}


def normalize_language(lang: str) -> str:
    """Lowercase a language tag and map long names to their code."""
    key = lang.strip().lower()
    return LANGUAGE_ALIASES.get(key, key)


class StopwordStore:
    """
    Lazily loaded, load-once stopword sets.

    Usage:
        store = StopwordStore(Path("stopwords"))
        if word in store.load("es"):
            ...
    """

    def __init__(self, directory: Path | str = BUNDLED_STOPWORDS_DIR):
        self.directory = Path(directory)
        self._cache: dict[str, frozenset[str]] = {}
        self._lock = threading.Lock()

    def path_for(self, lang: str) -> Path:
        return self.directory / f"{normalize_language(lang)}.txt"

    def load(self, lang: str) -> frozenset[str]:
        """
        Get the stopword set for a language.

        Args:
            lang: Language code or alias (e.g. "es", "spanish").

        Returns:
            Frozen set of lowercase stopwords, empty if no list exists.
        """
        key = normalize_language(lang)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        with self._lock:
            # Another thread may have loaded it while we waited
            if key not in self._cache:
                self._cache[key] = self._read(key)
            return self._cache[key]

    def is_loaded(self, lang: str) -> bool:
        return normalize_language(lang) in self._cache

    def _read(self, key: str) -> frozenset[str]:
        path = self.directory / f"{key}.txt"
        if not path.is_file():
            logger.debug("No stopword list for language", lang=key, path=str(path))
            return frozenset()

        words = set()
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                word = line.strip().lower()
                if word and not word.startswith("#"):
                    words.add(word)

        logger.debug("Stopword list loaded", lang=key, words=len(words))
        return frozenset(words)


@lru_cache
def get_stopword_store(directory: Path | str | None = None) -> StopwordStore:
    """
    Get the process-wide store for a directory.

    Uses lru_cache so every pipeline pointing at the same directory shares
    one cache. ``None`` selects the bundled lists.
    """
    return StopwordStore(directory if directory is not None else BUNDLED_STOPWORDS_DIR)
