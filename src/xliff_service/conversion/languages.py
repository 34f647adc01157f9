from dataclasses import dataclass

from langcodes import Language, LanguageTagError

from .errors import InvalidLanguageError


@dataclass(frozen=True)
class Locale:
    tag: str
    language: str
    iso3: str
    territory: str | None = None


def _parse(tag: str) -> Language:
    # Malformed tags degrade to the undetermined language instead of failing
    try:
        return Language.get(tag.strip(), normalize=True)
    except (LanguageTagError, ValueError):
        return Language.make()


def resolve_language(tag: str) -> Locale:
    """Resolve a language tag such as ``en`` or ``en-US`` into a Locale.

    Parsing is lenient, validation is not: the tag must name a registered
    language with a known three-letter ISO code, otherwise
    InvalidLanguageError is raised.
    """
    language = _parse(tag or "")
    if not language.language or language.language == "und":
        raise InvalidLanguageError(tag)
    try:
        iso3 = language.to_alpha3()
    except LookupError:
        raise InvalidLanguageError(tag) from None
    # Only the language subtag has to be registered; variants and extensions are kept as given
    if not iso3 or not Language.make(language=language.language).is_valid():
        raise InvalidLanguageError(tag)
    return Locale(
        tag=language.to_tag(),
        language=language.language,
        iso3=iso3,
        territory=language.territory,
    )
