from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple, Union
import re

# {name} placeholders; identifiers are ASCII letters, digits and underscores
PLACEHOLDER_REGEX = re.compile(r'\{([A-Za-z0-9_]+)\}')
# <...> spans without nested angle brackets
TAG_REGEX = re.compile(r'<[^<>]+>')
# <name=value> tags; the value shares the placeholder namespace
ATTRIBUTE_TAG_REGEX = re.compile(r'<[^=<>]+=([A-Za-z0-9_]+)>')


@dataclass(frozen=True)
class TokenSet:
    """Protected tokens found in one string."""
    placeholders: FrozenSet[str]
    dollar_count: int
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class PlaceholderMismatch:
    missing: FrozenSet[str]
    extra: FrozenSet[str]

    def describe(self) -> str:
        detail = "Placeholders do not match."
        if self.missing:
            detail += f" Missing: {', '.join(sorted(self.missing))}"
        if self.extra:
            detail += f" Extra: {', '.join(sorted(self.extra))}"
        return detail


@dataclass(frozen=True)
class SymbolCountMismatch:
    original_count: int
    translated_count: int

    def describe(self) -> str:
        return (f"Number of $ does not match. Original: {self.original_count}, "
                f"Translated: {self.translated_count}")


@dataclass(frozen=True)
class TagMismatch:
    original_tags: Tuple[str, ...]
    translated_tags: Tuple[str, ...]

    def describe(self) -> str:
        return (f"Tags do not match. Original tags: {', '.join(self.original_tags)}; "
                f"Translated tags: {', '.join(self.translated_tags)}")


Mismatch = Union[PlaceholderMismatch, SymbolCountMismatch, TagMismatch]


def extract_tokens(text: Optional[str]) -> TokenSet:
    """
    Collects the tokens a translation has to preserve.

    Args:
        text: The string to scan. None is treated as an empty string.

    Returns:
        TokenSet with
        - placeholders: identifiers of {name} placeholders, plus the value of
          every <name=value> tag.
        - dollar_count: number of '$' characters.
        - tags: every <...> span, in order of appearance.
    """
    text = text or ''
    tags = tuple(TAG_REGEX.findall(text))
    placeholders = set(PLACEHOLDER_REGEX.findall(text))
    for tag in tags:
        attribute = ATTRIBUTE_TAG_REGEX.fullmatch(tag)
        if attribute:
            placeholders.add(attribute.group(1))
    return TokenSet(
        placeholders=frozenset(placeholders),
        dollar_count=text.count('$'),
        tags=tags,
    )


def compare(original: Optional[str], translated: Optional[str]) -> List[Mismatch]:
    """
    Checks whether a translated string preserved the tokens of the original.

    Placeholders are compared as sets, so reordering is allowed. '$' is
    compared by count. Tags must appear with the same text in the same order.

    Args:
        original: The source string.
        translated: The translated string.

    Returns:
        A list of mismatches; empty when the translation is acceptable.
    """
    original_tokens = extract_tokens(original)
    translated_tokens = extract_tokens(translated)
    mismatches: List[Mismatch] = []

    if original_tokens.placeholders != translated_tokens.placeholders:
        mismatches.append(PlaceholderMismatch(
            missing=original_tokens.placeholders - translated_tokens.placeholders,
            extra=translated_tokens.placeholders - original_tokens.placeholders,
        ))

    if original_tokens.dollar_count != translated_tokens.dollar_count:
        mismatches.append(SymbolCountMismatch(
            original_count=original_tokens.dollar_count,
            translated_count=translated_tokens.dollar_count,
        ))

    if original_tokens.tags != translated_tokens.tags:
        mismatches.append(TagMismatch(
            original_tags=original_tokens.tags,
            translated_tags=translated_tokens.tags,
        ))

    return mismatches
