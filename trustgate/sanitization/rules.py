"""Static, ordered rule tables used by the sanitization layers.

Rules are evaluated in table order and the first match wins, so the rule name
reported back to callers is stable. New rules are appended.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(name: str, pattern: str, flags: int = re.IGNORECASE) -> Rule:
    return Rule(name=name, pattern=re.compile(pattern, flags))


def first_match(rules: tuple[Rule, ...], text: str) -> Rule | None:
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


# Instruction-override attempts aimed at the downstream AI consumer.
INJECTION_RULES: tuple[Rule, ...] = (
    _rule(
        "ignore_previous_instructions",
        r"\bignore\s+(?:all\s+)?(?:the\s+)?(?:previous|prior|above)\s+instructions\b",
    ),
    _rule("disregard_previous", r"\bdisregard\s+(?:all\s+)?(?:the\s+)?(?:previous|prior|above)\b"),
    _rule("system_prompt", r"\bsystem\s+prompt\b"),
    _rule("you_are_now", r"\byou\s+are\s+now\b"),
    _rule("override_system", r"\boverride\s+(?:the\s+)?system\b"),
    _rule("act_as", r"\bact\s+as\s+(?:a|an)\b"),
    _rule("pretend_to_be", r"\bpretend\s+(?:you\s+are|to\s+be)\b"),
    _rule("forget_rules", r"\bforget\s+(?:all\s+)?your\s+(?:rules|instructions)\b"),
    _rule("new_instructions", r"\bnew\s+instructions?\s*:"),
)

SQL_RULES: tuple[Rule, ...] = (
    _rule(
        "sql_keyword",
        r"\b(?:SELECT|INSERT|UPDATE|DELETE|DROP|UNION|ALTER|EXEC|TRUNCATE)\b",
    ),
    _rule(
        "sql_tautology",
        r"\bOR\b\s+['\"]?\w+['\"]?\s*=\s*['\"]?\w+['\"]?",
    ),
    _rule("sql_comment", r"--|/\*"),
)

# Generic script and event-handler markers for plain-text fields.
SCRIPT_RULES: tuple[Rule, ...] = (
    _rule("script_block", r"<script\b[^>]*>[\s\S]*?</script>"),
    _rule("javascript_uri", r"javascript:"),
    _rule("event_handler", r"\bon\w+\s*="),
    _rule("html_data_uri", r"data:text/html"),
)

# Immediate-execution vectors, blocked even inside source code.
EXECUTION_VECTOR_RULES: tuple[Rule, ...] = (
    _rule("javascript_uri", r"javascript\s*:"),
    _rule("vbscript_uri", r"vbscript\s*:"),
    _rule("html_data_uri", r"data\s*:\s*text/html"),
)

# Markup tags legitimate algorithmic code has no use for. Matched only in tag
# position so identifiers such as `form` or `base` stay valid.
HIGH_RISK_TAG_RULES: tuple[Rule, ...] = tuple(
    _rule(f"{tag}_tag", rf"<\s*/?\s*{tag}(?=[\s>/])")
    for tag in ("script", "iframe", "object", "embed", "meta", "base", "form")
)
