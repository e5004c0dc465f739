"""Signature decipherment from the site's player script.

The player script obfuscates every identifier and changes them per
deployment, so nothing here matches on names. The transform routine is
found by its shape (split the signature into characters, call helpers,
join), and each helper is classified by the shape of its body into one of
three primitive operations.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .errors import CipherError

_ID = r"[a-zA-Z_$][\w$]*"

TRANSFORM_FUNCTION_PATTERNS = (
    # name=function(a){a=a.split("");...;return a.join("")}
    re.compile(
        r"(?P<name>%s)\s*=\s*function\(\s*(?P<arg>%s)\s*\)\s*\{\s*"
        r"(?P=arg)\s*=\s*(?P=arg)\.split\(\s*(?:\"\"|'')\s*\)\s*;"
        r"(?P<body>[^{}]*?)"
        r"\s*return\s+(?P=arg)\.join\(\s*(?:\"\"|'')\s*\)" % (_ID, _ID)
    ),
    # function name(a){...}
    re.compile(
        r"function\s+(?P<name>%s)\s*\(\s*(?P<arg>%s)\s*\)\s*\{\s*"
        r"(?P=arg)\s*=\s*(?P=arg)\.split\(\s*(?:\"\"|'')\s*\)\s*;"
        r"(?P<body>[^{}]*?)"
        r"\s*return\s+(?P=arg)\.join\(\s*(?:\"\"|'')\s*\)" % (_ID, _ID)
    ),
)

CALL_PATTERN = re.compile(
    r"^(?P<obj>%s)(?:\.(?P<member>%s)|\[\s*[\"'](?P<quoted>%s)[\"']\s*\])"
    r"\(\s*(?P<arg>%s)\s*(?:,\s*(?P<index>\d+)\s*)?\)$" % (_ID, _ID, _ID, _ID)
)

MEMBER_PATTERN = re.compile(
    r"(?P<q>[\"']?)(?P<name>%s)(?P=q)\s*:\s*function\s*\((?P<params>[^)]*)\)\s*\{(?P<body>[^{}]*)\}"
    % _ID
)

REVERSE_BODY = re.compile(r"^\s*(?P<a>%s)\.reverse\(\s*\)\s*;?\s*$" % _ID)
SPLICE_BODY = re.compile(r"^\s*(?P<a>%s)\.splice\(\s*0\s*,\s*(?P<b>%s)\s*\)\s*;?\s*$" % (_ID, _ID))
SWAP_BODY = re.compile(
    r"^\s*var\s+(?P<c>{id})\s*=\s*(?P<a>{id})\[\s*0\s*\]\s*;"
    r"\s*(?P=a)\[\s*0\s*\]\s*=\s*(?P=a)\[\s*(?P<b>{id})\s*%\s*(?P=a)\.length\s*\]\s*;"
    r"\s*(?P=a)\[\s*(?P=b)(?:\s*%\s*(?P=a)\.length)?\s*\]\s*=\s*(?P=c)\s*;?\s*$".format(id=_ID)
)


class Operation:
    """A primitive step of the signature transform."""

    def apply(self, chars: List[str]) -> List[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class Reverse(Operation):
    def apply(self, chars: List[str]) -> List[str]:
        return chars[::-1]


@dataclass(frozen=True)
class Swap(Operation):
    """Exchange the first character with the one at ``index % len``."""
    index: int

    def apply(self, chars: List[str]) -> List[str]:
        if not chars:
            return chars
        result = list(chars)
        position = self.index % len(result)
        result[0], result[position] = result[position], result[0]
        return result


@dataclass(frozen=True)
class Splice(Operation):
    """Drop the first ``index`` characters."""
    index: int

    def apply(self, chars: List[str]) -> List[str]:
        return chars[self.index:]


def classify_member(params: str, body: str) -> Optional[str]:
    """Return ``reverse``, ``swap`` or ``splice`` for a helper body, else None."""
    names = [name.strip() for name in params.split(",") if name.strip()]
    if not names:
        return None

    match = REVERSE_BODY.match(body)
    if match and match.group("a") == names[0]:
        return "reverse"

    if len(names) < 2:
        return None

    match = SPLICE_BODY.match(body)
    if match and match.group("a") == names[0] and match.group("b") == names[1]:
        return "splice"

    match = SWAP_BODY.match(body)
    if match and match.group("a") == names[0] and match.group("b") == names[1]:
        return "swap"

    return None


def find_helper_object(js: str, name: str) -> Dict[str, Optional[str]]:
    """Map each member of the helper object *name* to its operation kind."""
    pattern = re.compile(
        r"(?<![\w$.])%s\s*=\s*\{(?P<body>.*?\})\s*\}\s*;" % re.escape(name), re.DOTALL
    )
    match = pattern.search(js)
    if not match:
        raise CipherError(f"Helper object {name} not found in player script")

    kinds: Dict[str, Optional[str]] = {}
    for member in MEMBER_PATTERN.finditer(match.group("body")):
        kinds[member.group("name")] = classify_member(member.group("params"), member.group("body"))
    return kinds


def _parse_routine(js: str, arg: str, body: str) -> List[Operation]:
    statements = [statement.strip() for statement in body.split(";") if statement.strip()]
    if not statements:
        raise CipherError("Transform routine has no steps")

    calls = []
    for statement in statements:
        match = CALL_PATTERN.match(statement)
        if not match or match.group("arg") != arg:
            raise CipherError(f"Unsupported transform statement: {statement!r}")
        calls.append(match)

    helper_names = {call.group("obj") for call in calls}
    if len(helper_names) != 1:
        raise CipherError("Transform routine uses more than one helper object")
    kinds = find_helper_object(js, helper_names.pop())

    plan: List[Operation] = []
    for call in calls:
        member = call.group("member") or call.group("quoted")
        kind = kinds.get(member)
        index = int(call.group("index")) if call.group("index") is not None else None
        if kind == "reverse":
            plan.append(Reverse())
        elif kind in ("swap", "splice") and index is not None:
            plan.append(Swap(index) if kind == "swap" else Splice(index))
        else:
            raise CipherError(f"Unrecognized helper {member!r} ({kind})")
    return plan


def parse_transform_plan(js: str) -> List[Operation]:
    """Derive the operation sequence from a player script.

    Every candidate routine is tried in order; the first one whose steps
    all resolve wins.
    """
    last_error: Optional[CipherError] = None
    for pattern in TRANSFORM_FUNCTION_PATTERNS:
        for match in pattern.finditer(js):
            try:
                return _parse_routine(js, match.group("arg"), match.group("body"))
            except CipherError as exc:
                last_error = exc
    if last_error is not None:
        raise last_error
    raise CipherError("Signature transform routine not found in player script")


def apply_plan(signature: str, plan: Sequence[Operation]) -> str:
    chars = list(signature)
    for operation in plan:
        chars = operation.apply(chars)
    return "".join(chars)


class SignatureCipher:
    """Deciphers signatures with the plan read from one player script."""

    def __init__(self, plan: Sequence[Operation]) -> None:
        self.plan = tuple(plan)

    @classmethod
    def from_player_script(cls, js: str) -> "SignatureCipher":
        return cls(parse_transform_plan(js))

    def decipher(self, signature: str) -> str:
        return apply_plan(signature, self.plan)
