from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FragmentContainer:
    """How a single method/body declaration is embedded for parsing.

    The source is wrapped in ``prefix``/``suffix`` and the declaration is the
    first non-comment named child of the first ``container_type`` node.
    """

    prefix: str
    suffix: str
    container_type: str

    @property
    def line_offset(self) -> int:
        return self.prefix.count("\n")


@dataclass(frozen=True)
class Language:
    name: str
    extensions: tuple[str, ...]
    aliases: tuple[str, ...]
    fragment: FragmentContainer


def _in_class(body_type: str) -> FragmentContainer:
    return FragmentContainer("class __Fragment__ {\n", "\n}", body_type)


def _top_level(root_type: str) -> FragmentContainer:
    return FragmentContainer("", "", root_type)


LANGUAGES = (
    Language("c", (".c", ".h"), (), _top_level("translation_unit")),
    Language("cpp", (".cc", ".cpp", ".cxx", ".hh", ".hpp"), ("c++",), _top_level("translation_unit")),
    Language("csharp", (".cs",), ("c#", "cs"), _in_class("declaration_list")),
    Language("go", (".go",), ("golang",), _top_level("source_file")),
    Language("java", (".java",), (), _in_class("class_body")),
    Language("javascript", (".js", ".jsx", ".mjs", ".cjs"), ("js",), _in_class("class_body")),
    Language("python", (".py",), ("py",), _top_level("module")),
    Language("ruby", (".rb",), ("rb",), _top_level("program")),
    Language("rust", (".rs",), ("rs",), _top_level("source_file")),
    Language("tsx", (".tsx",), (), _in_class("class_body")),
    Language("typescript", (".ts",), ("ts",), _in_class("class_body")),
)

_BY_NAME = {lang.name: lang for lang in LANGUAGES}
_BY_ALIAS = {alias: lang for lang in LANGUAGES for alias in (lang.name, *lang.aliases)}
_BY_EXTENSION = {ext: lang for lang in LANGUAGES for ext in lang.extensions}


def normalize_language(language: str) -> str:
    lang = _BY_ALIAS.get(language.strip().lower())
    if lang is None:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(_BY_NAME)}")
    return lang.name


def detect_language_from_path(file_path: Path) -> str:
    lang = _BY_EXTENSION.get(file_path.suffix.lower())
    if lang is None:
        raise ValueError(f"Unsupported file extension: {file_path.suffix or file_path.name}")
    return lang.name


def resolve_language(language: str | None, file_path: Path | None) -> str:
    """Explicit language (name or alias) wins over the file extension."""
    if language:
        return normalize_language(language)
    if file_path is None:
        raise ValueError("no language given and no file to detect it from")
    return detect_language_from_path(file_path)


def fragment_container(language: str) -> FragmentContainer:
    lang = _BY_NAME.get(language)
    if lang is None:
        raise ValueError(f"method mode is not supported for {language}")
    return lang.fragment
