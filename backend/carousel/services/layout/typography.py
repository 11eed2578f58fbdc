"""Typographic preprocessing - keeps connectors and numeric phrases off line ends."""

import re

NBSP = "\u00a0"

# Short conjunctions, prepositions and particles that must not end a line alone
CONNECTOR_WORDS = (
    "и", "а", "но", "да", "или", "либо", "то", "не", "ни",
    "за", "для", "без", "при", "про", "под", "над", "через", "между",
    "из", "от", "до", "на", "в", "с", "у", "о", "об", "во", "со", "ко", "к",
    "что", "как", "где", "когда", "если", "чтобы", "который", "которая",
)

_CONNECTOR_RE = re.compile(
    r"(?<![^\W_])(" + "|".join(sorted(CONNECTOR_WORDS, key=len, reverse=True)) + r")[^\S\n]+(?=\S)",
    re.IGNORECASE,
)

UNIT_WORDS = (
    # time
    r"час[^\W_]*", r"минут[^\W_]*", r"мин\.?", r"секунд[^\W_]*", r"сек\.?",
    r"дн[еяи][^\W_]*", r"день", r"сут[^\W_]*", r"недел[^\W_]*", r"месяц[^\W_]*", r"год[^\W_]*", r"лет", r"раз[^\W_]*",
    # money and magnitudes
    r"руб[^\W_]*", r"р\.", r"доллар[^\W_]*", r"евро", r"тыс\.?", r"млн", r"млрд",
    # measurements
    r"км", r"кг", r"см", r"мм", r"м", r"г", r"т", r"л", r"шт\.?",
    r"человек[^\W_]*", r"клиент[^\W_]*", r"сотрудник[^\W_]*",
)

_NUMBER = r"\d+(?:[.,]\d+)?"

# "95 %", "100 ₽", "3 часа", "5 млн"
_NUMBER_UNIT_RE = re.compile(
    r"(" + _NUMBER + r")[^\S\n]+(%|‰|₽|\$|€|£|(?:" + "|".join(UNIT_WORDS) + r")(?![^\W_]))",
    re.IGNORECASE,
)
# "$ 100", "€ 20"
_SIGN_NUMBER_RE = re.compile(r"([$€£₽])[^\S\n]+(?=\d)")
# "1 000 000"
_DIGIT_GROUP_RE = re.compile(r"(?<=\d)[^\S\n](?=\d{3}(?!\d))")


def protect_connectors(text: str) -> str:
    """Glue short connector words to the word that follows them."""
    if not text:
        return text
    return _CONNECTOR_RE.sub(lambda m: m.group(1) + NBSP, text)


def protect_numbers(text: str) -> str:
    """Fuse number + unit/symbol phrases into unbreakable tokens."""
    if not text:
        return text
    text = _DIGIT_GROUP_RE.sub(NBSP, text)
    text = _SIGN_NUMBER_RE.sub(lambda m: m.group(1) + NBSP, text)
    return _NUMBER_UNIT_RE.sub(lambda m: m.group(1) + NBSP + m.group(2), text)


def preprocess(text: str) -> str:
    """Apply all typographic protections to raw slide text.

    Only phrases that are contiguous in the raw text are recognized: a
    ``**``/``__`` delimiter between a number and its unit hides the phrase.
    """
    if not text:
        return ""
    return protect_connectors(protect_numbers(text))


def to_display(text: str) -> str:
    """Swap no-break joiners back to plain spaces for measuring and drawing."""
    return text.replace(NBSP, " ")
