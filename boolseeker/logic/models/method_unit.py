"""
Method unit domain models.

A method unit is the declaration-to-terminator text span of one boolean
method found in a disassembly file. A finding is what classification of
that unit produced.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any


@dataclass(frozen=True)
class MethodUnit:
    """One extracted boolean method, declaration line through terminator line."""
    qualified_name: str
    body_text: str
    source_file: str = ""
    start_line: int = 0
    end_line: int = 0

    def __post_init__(self):
        if not self.qualified_name:
            raise ValueError("Method unit must have a qualified name")

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1 if self.end_line else 0


@dataclass(frozen=True)
class Finding:
    """Keyword classification result for a single method."""
    method: str
    matched_keywords: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def matched(self) -> bool:
        return bool(self.matched_keywords)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method,
            'matched_keywords': list(self.matched_keywords),
        }


def qualified_class_name(relative_path: str, extension: str) -> str:
    """
    Turn a file path relative to a smali root into a dotted class name.

    Inner-class separators collapse into dots as well, so ``a/b/C$D.smali``
    becomes ``a.b.C.D`` and cannot be told apart from a class ``D`` in
    package ``a.b.C``.
    """
    name = relative_path
    if extension and name.endswith(extension):
        name = name[:-len(extension)]
    name = name.replace("\\", "/")
    return name.replace("/", ".").replace("$", ".")


def qualified_method_name(class_name: str, method_name: str) -> str:
    return f"{class_name}.{method_name}()"
