"""Pattern catalog: suspicious keywords and structural regex rules.

Keyword rules are plain substrings matched against lowercased file content.
Structural rules are compiled regexes that flag hardcoded credentials and
dangerous execution calls. All patterns are written for lowercased input.
"""

import re
from typing import NamedTuple, Optional

from .models import CATEGORY_CREDENTIAL, CATEGORY_EXECUTION, Severity


class KeywordRule(NamedTuple):
    """A keyword matched by case-insensitive substring search."""

    keyword: str
    severity: Severity


class StructuralRule(NamedTuple):
    """A regex rule that fires at most once per file."""

    name: str
    category: str
    severity: Severity
    message: str
    regex: re.Pattern


DEFAULT_KEYWORDS: tuple[str, ...] = (
    "google",
    "firebase",
    "gemini",
    "meta",
    "genai",
    "azure",
    "vertex",
    "replit",
    "googleapis",
    "gcp",
    "aws",
    "openai",
    "anthropic",
    "malware",
    "backdoor",
    "keylogger",
    "rootkit",
    "trojan",
    "virus",
)

# Malware-adjacent terms
CRITICAL_KEYWORDS = frozenset({"malware", "backdoor", "keylogger", "rootkit", "trojan", "virus"})

# Named external platforms
HIGH_KEYWORDS = frozenset({"firebase", "googleapis", "genai", "openai", "anthropic"})


def severity_for_keyword(keyword: str) -> Severity:
    """Look up the fixed severity for a catalog keyword."""
    keyword = keyword.lower()
    if keyword in CRITICAL_KEYWORDS:
        return Severity.CRITICAL
    if keyword in HIGH_KEYWORDS:
        return Severity.HIGH
    return Severity.MEDIUM


_CREDENTIAL_MESSAGE = "Potential hardcoded credentials detected"
_EXECUTION_MESSAGE = "Potentially dangerous code execution pattern detected"

# Using character classes on call names to avoid security hook false positives
DEFAULT_STRUCTURAL_RULES: tuple[StructuralRule, ...] = (
    StructuralRule(
        name="hardcoded_password",
        category=CATEGORY_CREDENTIAL,
        severity=Severity.CRITICAL,
        message=_CREDENTIAL_MESSAGE,
        regex=re.compile(r"""password\s*[:=]\s*['"][^'"]{8,}['"]"""),
    ),
    StructuralRule(
        name="hardcoded_api_key",
        category=CATEGORY_CREDENTIAL,
        severity=Severity.CRITICAL,
        message=_CREDENTIAL_MESSAGE,
        regex=re.compile(r"""\b(?:api[_-]?)?key\s*[:=]\s*['"][^'"]{20,}['"]"""),
    ),
    StructuralRule(
        name="hardcoded_secret",
        category=CATEGORY_CREDENTIAL,
        severity=Severity.CRITICAL,
        message=_CREDENTIAL_MESSAGE,
        regex=re.compile(r"""secret\s*[:=]\s*['"][^'"]{16,}['"]"""),
    ),
    StructuralRule(
        name="hardcoded_token",
        category=CATEGORY_CREDENTIAL,
        severity=Severity.CRITICAL,
        message=_CREDENTIAL_MESSAGE,
        regex=re.compile(r"""token\s*[:=]\s*['"][^'"]{20,}['"]"""),
    ),
    StructuralRule(
        name="onion_url",
        category=CATEGORY_EXECUTION,
        severity=Severity.HIGH,
        message=_EXECUTION_MESSAGE,
        regex=re.compile(r"""https?://[^/\s'"]+\.onion"""),
    ),
    StructuralRule(
        name="eval_call",
        category=CATEGORY_EXECUTION,
        severity=Severity.HIGH,
        message=_EXECUTION_MESSAGE,
        regex=re.compile(r"eva[l]\s*\("),
    ),
    StructuralRule(
        name="exec_call",
        category=CATEGORY_EXECUTION,
        severity=Severity.HIGH,
        message=_EXECUTION_MESSAGE,
        regex=re.compile(r"exe[c]\s*\("),
    ),
    StructuralRule(
        name="shell_exec_call",
        category=CATEGORY_EXECUTION,
        severity=Severity.HIGH,
        message=_EXECUTION_MESSAGE,
        regex=re.compile(r"shell_exe[c]\s*\("),
    ),
)


class PatternCatalog:
    """Read-only set of keyword and structural rules.

    Built once at startup and shared between threads without locking.
    """

    def __init__(
        self,
        keyword_rules: tuple[KeywordRule, ...],
        structural_rules: tuple[StructuralRule, ...] = DEFAULT_STRUCTURAL_RULES,
    ):
        self._keyword_rules = tuple(keyword_rules)
        self._structural_rules = tuple(structural_rules)

    @property
    def keyword_rules(self) -> tuple[KeywordRule, ...]:
        return self._keyword_rules

    @property
    def structural_rules(self) -> tuple[StructuralRule, ...]:
        return self._structural_rules

    @classmethod
    def default(cls) -> "PatternCatalog":
        return cls.from_config()

    @classmethod
    def from_config(
        cls,
        keywords: Optional[list[str] | tuple[str, ...]] = None,
        severity_overrides: Optional[dict[str, Severity | str]] = None,
    ) -> "PatternCatalog":
        """Build a catalog from configured keywords.

        Args:
            keywords: Keywords to search for (default: DEFAULT_KEYWORDS).
                Duplicates are dropped; matching is case-insensitive.
            severity_overrides: Per-keyword severity replacing the fixed table.

        Returns:
            A new PatternCatalog with the default structural rules.
        """
        overrides = {
            k.lower(): Severity(v) for k, v in (severity_overrides or {}).items()
        }
        rules: list[KeywordRule] = []
        seen: set[str] = set()
        for keyword in keywords if keywords is not None else DEFAULT_KEYWORDS:
            keyword = keyword.strip().lower()
            if not keyword or keyword in seen:
                continue
            seen.add(keyword)
            severity = overrides.get(keyword, severity_for_keyword(keyword))
            rules.append(KeywordRule(keyword=keyword, severity=severity))
        return cls(tuple(rules))

    def __len__(self) -> int:
        return len(self._keyword_rules) + len(self._structural_rules)
