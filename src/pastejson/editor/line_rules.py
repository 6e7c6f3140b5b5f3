"""Predicates deciding which generated lines can be dropped when pasting.

Generated sources open with import directives and header comments. When the
paste lands below existing code those lines would duplicate the file header,
so leading and trailing ignorable lines are trimmed before insertion. What
counts as a comment or an import depends on the target language, which is
looked up from the buffer's content-type identifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import dropwhile
from pathlib import Path
from typing import Callable, Iterable, Sequence


@dataclass(slots=True, frozen=True)
class LanguageProfile:
    """Per content-type knowledge about generated source lines."""

    content_type: str
    language: str
    suffixes: tuple[str, ...] = ()
    comment_prefixes: tuple[str, ...] = ("//",)
    import_prefixes: tuple[str, ...] = ("import ",)


DEFAULT_PROFILE = LanguageProfile(content_type="", language="swift")

_PROFILES: tuple[LanguageProfile, ...] = (
    LanguageProfile("public.swift-source", "swift", (".swift",)),
    LanguageProfile(
        "public.objective-c-source",
        "objective-c",
        (".m", ".h"),
        import_prefixes=("#import ", "@import ", "#include "),
    ),
    LanguageProfile(
        "public.python-script",
        "python",
        (".py",),
        comment_prefixes=("#",),
        import_prefixes=("import ", "from "),
    ),
    LanguageProfile("com.microsoft.typescript", "typescript", (".ts",)),
    LanguageProfile("com.netscape.javascript-source", "javascript", (".js",)),
    LanguageProfile("com.sun.java-source", "java", (".java",)),
    LanguageProfile("org.kotlinlang.kotlin-source", "kotlin", (".kt",)),
    LanguageProfile("public.go-source", "go", (".go",), import_prefixes=("import ", "package ")),
    LanguageProfile("com.microsoft.csharp-source", "csharp", (".cs",), import_prefixes=("using ",)),
    LanguageProfile("public.rust-source", "rust", (".rs",), import_prefixes=("use ", "extern crate ")),
)

_BY_CONTENT_TYPE = {profile.content_type: profile for profile in _PROFILES}
_BY_SUFFIX = {suffix: profile for profile in _PROFILES for suffix in profile.suffixes}


def profile_for(content_type: str | None) -> LanguageProfile:
    """Return the profile registered for ``content_type`` or the default."""

    return _BY_CONTENT_TYPE.get((content_type or "").strip(), DEFAULT_PROFILE)


def profile_for_path(path: Path | str) -> LanguageProfile:
    """Infer a profile from a file suffix, falling back to the default."""

    return _BY_SUFFIX.get(Path(path).suffix.lower(), DEFAULT_PROFILE)


def known_profiles() -> tuple[LanguageProfile, ...]:
    return _PROFILES


def is_blank(line: str) -> bool:
    return not line.strip()


def is_comment(line: str, profile: LanguageProfile = DEFAULT_PROFILE) -> bool:
    return line.startswith(profile.comment_prefixes)


def is_import(line: str, profile: LanguageProfile = DEFAULT_PROFILE) -> bool:
    return line.startswith(profile.import_prefixes)


def is_ignorable(line: str, profile: LanguageProfile = DEFAULT_PROFILE) -> bool:
    """Return ``True`` for comments, imports and blank lines."""

    return is_comment(line, profile) or is_import(line, profile) or is_blank(line)


def clean_generated_lines(
    lines: Iterable[str],
    profile: LanguageProfile = DEFAULT_PROFILE,
) -> list[str]:
    """Drop ignorable lines from both ends of ``lines``."""

    predicate: Callable[[str], bool] = lambda line: is_ignorable(line, profile)
    head_trimmed = list(dropwhile(predicate, lines))
    return list(reversed(list(dropwhile(predicate, reversed(head_trimmed)))))


def inserting_after_code(
    buffer_lines: Sequence[str],
    line: int,
    profile: LanguageProfile = DEFAULT_PROFILE,
) -> bool:
    """Return ``True`` when a non-blank, non-comment line precedes ``line``."""

    for text in buffer_lines[: max(0, line)]:
        if is_blank(text) or is_comment(text, profile):
            continue
        return True
    return False


__all__ = [
    "LanguageProfile",
    "DEFAULT_PROFILE",
    "profile_for",
    "profile_for_path",
    "known_profiles",
    "is_blank",
    "is_comment",
    "is_import",
    "is_ignorable",
    "clean_generated_lines",
    "inserting_after_code",
]
