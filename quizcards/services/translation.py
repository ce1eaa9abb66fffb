# Locale string lookup for the fixed texts used in quiz questions and progress messages
# quizcards/services/translation.py
from typing import Callable, Dict, Optional

from quizcards.utils.logger import logger

# (key, locale) -> text
Translate = Callable[[str, str], str]

FALLBACK_LOCALE = "en"

CATALOG: Dict[str, Dict[str, str]] = {
    "en": {
        "quiz.yearQuestion": "In what year was this song released?",
        "quiz.artistQuestion": "Who is the artist of this song?",
        "quiz.titleQuestion": "What is the title of this song?",
        "quiz.missingWordQuestion": "Which word is missing from the title?",
        "quiz.releaseOrderQuestion": "Where does this song fit in the release order?",
        "quiz.decadeQuestion": "In which decade was this song released?",
        "quiz.progress.year": "Creating year questions",
        "quiz.progress.trivia": "Generating trivia questions",
        "quiz.progress.artist": "Generating artist questions",
        "quiz.progress.missing_word": "Generating missing word questions",
        "quiz.progress.title": "Generating title questions",
    },
    "nl": {
        "quiz.yearQuestion": "In welk jaar is dit nummer uitgebracht?",
        "quiz.artistQuestion": "Wie is de artiest van dit nummer?",
        "quiz.titleQuestion": "Wat is de titel van dit nummer?",
        "quiz.missingWordQuestion": "Welk woord ontbreekt in de titel?",
        "quiz.releaseOrderQuestion": "Waar past dit nummer in de volgorde van uitbrengen?",
        "quiz.decadeQuestion": "In welk decennium is dit nummer uitgebracht?",
        "quiz.progress.year": "Jaarvragen maken",
        "quiz.progress.trivia": "Triviavragen genereren",
        "quiz.progress.artist": "Artiestvragen genereren",
        "quiz.progress.missing_word": "Ontbrekend-woordvragen genereren",
        "quiz.progress.title": "Titelvragen genereren",
    },
    "de": {
        "quiz.yearQuestion": "In welchem Jahr wurde dieser Song veröffentlicht?",
        "quiz.artistQuestion": "Wer ist der Interpret dieses Songs?",
        "quiz.titleQuestion": "Wie heißt dieser Song?",
        "quiz.missingWordQuestion": "Welches Wort fehlt im Titel?",
        "quiz.releaseOrderQuestion": "Wo passt dieser Song in die Veröffentlichungsreihenfolge?",
        "quiz.decadeQuestion": "In welchem Jahrzehnt wurde dieser Song veröffentlicht?",
        "quiz.progress.year": "Jahresfragen werden erstellt",
        "quiz.progress.trivia": "Triviafragen werden generiert",
        "quiz.progress.artist": "Interpretenfragen werden generiert",
        "quiz.progress.missing_word": "Fragen zum fehlenden Wort werden generiert",
        "quiz.progress.title": "Titelfragen werden generiert",
    },
    "fr": {
        "quiz.yearQuestion": "En quelle année cette chanson est-elle sortie ?",
        "quiz.artistQuestion": "Qui est l'artiste de cette chanson ?",
        "quiz.titleQuestion": "Quel est le titre de cette chanson ?",
        "quiz.missingWordQuestion": "Quel mot manque dans le titre ?",
        "quiz.releaseOrderQuestion": "Où se place cette chanson dans l'ordre de sortie ?",
        "quiz.decadeQuestion": "Dans quelle décennie cette chanson est-elle sortie ?",
        "quiz.progress.year": "Création des questions sur l'année",
        "quiz.progress.trivia": "Génération des questions de culture musicale",
        "quiz.progress.artist": "Génération des questions sur l'artiste",
        "quiz.progress.missing_word": "Génération des questions du mot manquant",
        "quiz.progress.title": "Génération des questions sur le titre",
    },
    "es": {
        "quiz.yearQuestion": "¿En qué año se lanzó esta canción?",
        "quiz.artistQuestion": "¿Quién es el artista de esta canción?",
        "quiz.titleQuestion": "¿Cuál es el título de esta canción?",
        "quiz.missingWordQuestion": "¿Qué palabra falta en el título?",
        "quiz.releaseOrderQuestion": "¿Dónde encaja esta canción en el orden de lanzamiento?",
        "quiz.decadeQuestion": "¿En qué década se lanzó esta canción?",
        "quiz.progress.year": "Creando preguntas sobre el año",
        "quiz.progress.trivia": "Generando preguntas de trivia",
        "quiz.progress.artist": "Generando preguntas sobre el artista",
        "quiz.progress.missing_word": "Generando preguntas de la palabra que falta",
        "quiz.progress.title": "Generando preguntas sobre el título",
    },
}


class Translation:
    def __init__(self, catalog: Optional[Dict[str, Dict[str, str]]] = None, fallback_locale: str = FALLBACK_LOCALE):
        self.catalog = catalog if catalog is not None else CATALOG
        self.fallback_locale = fallback_locale

    def translate(self, key: str, locale: Optional[str] = None, options: Optional[dict] = None) -> str:
        """Looks up a key for a locale, falling back to the fallback locale and then the key itself."""
        locale = (locale or self.fallback_locale).lower()
        if locale not in self.catalog:
            locale = locale.replace("_", "-").split("-")[0]  # en-GB -> en
        text = self.catalog.get(locale, {}).get(key)
        if text is None:
            text = self.catalog.get(self.fallback_locale, {}).get(key)
            if text is None:
                logger.warning(f"Missing translation for key '{key}' (locale '{locale}')")
                return key
        if options:
            text = text.format(**options)
        return text

    def __call__(self, key: str, locale: str) -> str:
        return self.translate(key, locale)

translation = Translation()
