"""
Keyword catalog domain model.

Holds the fixed indicator strings used to flag boolean methods, and the
category buckets those indicators are reported under.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple, Any, Optional


CATALOG_VERSION = "1"


class Category(Enum):
    """Detection categories used to group keyword matches for reporting."""
    ROOT_DETECTION = "RootDetection"
    EMULATOR_DETECTION = "EmulatorDetection"
    RUNTIME_INTEGRITY = "RuntimeIntegrity"
    FILE_INTEGRITY = "FileIntegrity"

    @property
    def title(self) -> str:
        """Human-readable heading for console output."""
        return _CATEGORY_TITLES[self]

    @classmethod
    def from_name(cls, name: str) -> 'Category':
        """Resolve a category from its value or enum member name."""
        for category in cls:
            if name in (category.value, category.name, category.name.lower()):
                return category
        raise ValueError(f"Unknown keyword category: {name}")


_CATEGORY_TITLES = {
    Category.ROOT_DETECTION: "Rooted Device Detection",
    Category.EMULATOR_DETECTION: "Emulator Detection",
    Category.RUNTIME_INTEGRITY: "Runtime Integrity Verification",
    Category.FILE_INTEGRITY: "File Integrity Checks",
}


JAVA_KEYWORDS = (
    "ro.hardware", "ro.kernel.qemu", "ro.product.device", "ro.build.product",
    "ro.product.model", "ro.build.fingerprint", "/sys/qemu_trace",
    "/dev/qemu_trace", "/dev/socket/qemud", "/dev/qemu_pipe",
    "/system/bin/netcfg", "/proc/cpuinfo", "/proc/tty/drivers", "magisk",
    "root", "test-keys", "superuser", "Superuser", "daemonsu",
    "99SuperSUDaemon", ".has_su_daemon", "genymotion", "emulator", "nox",
    "27042", "frida", "27043", "FridaGadget", "xposed", "MessageDigest",
    "getPackageInfo", "signature", "/system/app/Superuser.apk",
    "/system/xbin/su",
)

CATEGORY_KEYWORDS = {
    Category.ROOT_DETECTION: (
        "magisk", "root", "test-keys", "superuser", "Superuser", "daemonsu",
        "99SuperSUDaemon", ".has_su_daemon", "/system/app/Superuser.apk",
        "/system/xbin/su",
    ),
    Category.EMULATOR_DETECTION: (
        "ro.hardware", "ro.kernel.qemu", "ro.product.device", "ro.build.product",
        "ro.product.model", "ro.build.fingerprint", "genymotion", "geny",
        "emulator", "nox", "/proc/tty/drivers", "/sys/qemu_trace",
        "/dev/qemu_trace", "/dev/socket/qemud", "/dev/qemu_pipe",
        "/system/bin/netcfg", "/proc/cpuinfo", "/proc/tty/drivers",
    ),
    Category.RUNTIME_INTEGRITY: (
        "27042", "frida", "27043", "FridaGadget", "xposed",
    ),
    Category.FILE_INTEGRITY: (
        "MessageDigest", "getPackageInfo", "signature",
    ),
}

NATIVE_KEYWORDS = ("frida", "xposed", "su", "root", "magisk", "/sbin/su", "test-keys")


def ordered_unique(keywords: Iterable[str]) -> Tuple[str, ...]:
    """De-duplicate keywords case-insensitively, keeping the first spelling."""
    seen = set()
    unique = []
    for keyword in keywords:
        key = keyword.lower()
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(keyword)
    return tuple(unique)


@dataclass(frozen=True)
class KeywordCatalog:
    """
    Immutable set of indicator keywords and their category memberships.

    Category sets may overlap each other and the flat set. All comparisons
    against the catalog are case-insensitive.
    """

    java_keywords: Tuple[str, ...]
    native_keywords: Tuple[str, ...]
    categories: Mapping[Category, Tuple[str, ...]] = field(default_factory=dict)
    version: str = CATALOG_VERSION

    def __post_init__(self):
        object.__setattr__(self, 'java_keywords', ordered_unique(self.java_keywords))
        object.__setattr__(self, 'native_keywords', ordered_unique(self.native_keywords))
        categories = {category: () for category in Category}
        for category, keywords in self.categories.items():
            categories[category] = ordered_unique(keywords)
        object.__setattr__(self, 'categories', MappingProxyType(categories))

    def __hash__(self):
        return hash((self.java_keywords, self.native_keywords, self.version))

    def category_keywords(self, category: Category) -> Tuple[str, ...]:
        """Get the keyword set for one category."""
        return self.categories.get(category, ())

    @classmethod
    def default(cls) -> 'KeywordCatalog':
        """The fixed, versioned catalog shipped with the tool."""
        return cls(
            java_keywords=JAVA_KEYWORDS,
            native_keywords=NATIVE_KEYWORDS,
            categories=dict(CATEGORY_KEYWORDS),
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'KeywordCatalog':
        """
        Build a catalog from a configuration mapping.

        Missing sections fall back to the built-in data, so a config file can
        override only the parts it cares about.
        """
        if not data:
            return cls.default()

        categories = dict(CATEGORY_KEYWORDS)
        if data.get('categories') is not None:
            if not isinstance(data['categories'], dict):
                raise ValueError("keywords.categories must map category names to keyword lists")
            categories = {
                Category.from_name(name): tuple(keywords or ())
                for name, keywords in data['categories'].items()
            }

        return cls(
            java_keywords=tuple(data.get('java', JAVA_KEYWORDS)),
            native_keywords=tuple(data.get('native', NATIVE_KEYWORDS)),
            categories=categories,
            version=str(data.get('version', 'custom')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the catalog to a plain dictionary."""
        return {
            'version': self.version,
            'java': list(self.java_keywords),
            'native': list(self.native_keywords),
            'categories': {
                category.value: list(keywords)
                for category, keywords in self.categories.items()
            },
        }
