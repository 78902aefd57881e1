#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/omml.py
"""Office Math Markup Language (OMML) parsing and rendering.

OMML fragments are parsed into a small immutable expression tree, which is
then rendered by independent pure functions:

- :func:`to_latex` for LaTeX source
- :func:`to_unicode` for plain text using Unicode super/subscripts and
  pre-composed fraction glyphs
- :func:`fallback_text` for the bare leaf text

Parsing is tolerant. lxml's recovering parser is used, property elements
(``m:fPr``, ``m:naryPr``, ``m:rPr``...) are skipped, and unknown structures
are flattened into sequences of their children.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from lxml import etree

from doxx.constants import MATH_NS, MATH_TAG_PREFIX, WORDPROCESSING_NS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MathText:
    """Literal text run (``m:r``/``m:t``)."""

    text: str


@dataclass(frozen=True)
class MathSequence:
    """Ordered group of expressions."""

    items: tuple["MathNode", ...] = ()


@dataclass(frozen=True)
class MathSuperscript:
    """Base raised to a superscript (``m:sSup``)."""

    base: "MathNode"
    sup: "MathNode"


@dataclass(frozen=True)
class MathSubscript:
    """Base with a subscript (``m:sSub``)."""

    base: "MathNode"
    sub: "MathNode"


@dataclass(frozen=True)
class MathFraction:
    """Fraction (``m:f``); ``no_bar`` marks a binomial coefficient."""

    num: "MathNode"
    den: "MathNode"
    no_bar: bool = False


@dataclass(frozen=True)
class MathNary:
    """N-ary operator such as a sum or integral (``m:nary``).

    Parameters
    ----------
    operator : str
        Operator glyph from ``m:chr``; Word omits it for a summation
    sub, sup : MathNode or None
        Lower and upper limits, None when hidden or empty
    base : MathNode
        Operand

    """

    operator: str
    sub: Optional["MathNode"]
    sup: Optional["MathNode"]
    base: "MathNode"


@dataclass(frozen=True)
class MathDelimiter:
    """Parenthesized content (``m:d``)."""

    content: "MathNode"


@dataclass(frozen=True)
class MathRadical:
    """Root (``m:rad``) with an optional degree."""

    base: "MathNode"
    degree: Optional["MathNode"] = None


@dataclass(frozen=True)
class MathFunction:
    """Named function application (``m:func``) such as ``sin x``."""

    name: str
    argument: "MathNode"


MathNode = Union[
    MathText,
    MathSequence,
    MathSuperscript,
    MathSubscript,
    MathFraction,
    MathNary,
    MathDelimiter,
    MathRadical,
    MathFunction,
]

EMPTY = MathSequence()


@dataclass(frozen=True)
class ParsedEquation:
    """All renderings of one equation."""

    latex: str
    fallback: str
    unicode: str


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

_FRAGMENT_WRAPPER = f'<omml xmlns:m="{MATH_NS}" xmlns:w="{WORDPROCESSING_NS}">{{}}</omml>'


def _omml_local_name(tag: Any) -> str:
    if not isinstance(tag, str):
        return ""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag.rsplit(":", 1)[-1]


def _is_property(name: str) -> bool:
    return name.endswith("Pr")


def _iter_omml_children(element: Any) -> list[Any]:
    children = []
    for child in element:
        name = _omml_local_name(child.tag)
        if not name or _is_property(name):
            continue
        children.append(child)
    return children


def _omml_find_child(element: Any, name: str) -> Any | None:
    for child in _iter_omml_children(element):
        if _omml_local_name(child.tag) == name:
            return child
    return None


def _omml_val(element: Any) -> Optional[str]:
    if element is None:
        return None
    return element.get(f"{MATH_TAG_PREFIX}val", element.get("val"))


def _omml_property(element: Any, prop_name: str, value_name: str) -> Optional[str]:
    for child in element:
        if _omml_local_name(child.tag) == prop_name:
            for prop in child:
                if _omml_local_name(prop.tag) == value_name:
                    return _omml_val(prop)
    return None


def _sequence(nodes: list[MathNode]) -> MathNode:
    if len(nodes) == 1:
        return nodes[0]
    return MathSequence(tuple(nodes))


def _is_empty(node: MathNode) -> bool:
    return isinstance(node, MathSequence) and not node.items


def _parse_children(element: Any) -> MathNode:
    """Parse the content of a container, including bare text."""
    nodes: list[MathNode] = []
    if element.text and element.text.strip():
        nodes.append(MathText(element.text.strip()))
    for child in _iter_omml_children(element):
        node = _parse_element(child)
        if not _is_empty(node):
            nodes.append(node)
        if child.tail and child.tail.strip():
            nodes.append(MathText(child.tail.strip()))
    return _sequence(nodes)


def _parse_named(element: Any, name: str) -> MathNode:
    child = _omml_find_child(element, name)
    if child is None:
        return EMPTY
    return _parse_children(child)


def _optional(element: Any, name: str) -> Optional[MathNode]:
    node = _parse_named(element, name)
    return None if _is_empty(node) else node


def _handle_run(element: Any) -> MathNode:
    text = "".join(child.text or "" for child in element if _omml_local_name(child.tag) == "t")
    return MathText(text) if text else EMPTY


def _handle_text(element: Any) -> MathNode:
    return MathText(element.text) if element.text else EMPTY


def _handle_fraction(element: Any) -> MathNode:
    no_bar = _omml_property(element, "fPr", "type") == "noBar"
    return MathFraction(num=_parse_named(element, "num"), den=_parse_named(element, "den"), no_bar=no_bar)


def _handle_superscript(element: Any) -> MathNode:
    return MathSuperscript(base=_parse_named(element, "e"), sup=_parse_named(element, "sup"))


def _handle_subscript(element: Any) -> MathNode:
    return MathSubscript(base=_parse_named(element, "e"), sub=_parse_named(element, "sub"))


def _handle_subsuperscript(element: Any) -> MathNode:
    base = MathSubscript(base=_parse_named(element, "e"), sub=_parse_named(element, "sub"))
    return MathSuperscript(base=base, sup=_parse_named(element, "sup"))


def _handle_nary(element: Any) -> MathNode:
    operator = _omml_property(element, "naryPr", "chr") or "∑"
    return MathNary(
        operator=operator,
        sub=_optional(element, "sub"),
        sup=_optional(element, "sup"),
        base=_parse_named(element, "e"),
    )


def _handle_delimiter(element: Any) -> MathNode:
    parts = [_parse_children(child) for child in _iter_omml_children(element) if _omml_local_name(child.tag) == "e"]
    if len(parts) > 1:
        separated: list[MathNode] = []
        for index, part in enumerate(parts):
            if index:
                separated.append(MathText(","))
            separated.append(part)
        parts = separated
    return MathDelimiter(content=_sequence(parts))


def _handle_radical(element: Any) -> MathNode:
    return MathRadical(base=_parse_named(element, "e"), degree=_optional(element, "deg"))


def _handle_function(element: Any) -> MathNode:
    name = fallback_text(_parse_named(element, "fName")).strip()
    return MathFunction(name=name, argument=_parse_named(element, "e"))


_OMML_HANDLERS: dict[str, Callable[[Any], MathNode]] = {
    "r": _handle_run,
    "t": _handle_text,
    "f": _handle_fraction,
    "sSup": _handle_superscript,
    "sSub": _handle_subscript,
    "sSubSup": _handle_subsuperscript,
    "nary": _handle_nary,
    "d": _handle_delimiter,
    "rad": _handle_radical,
    "func": _handle_function,
}


def _parse_element(element: Any) -> MathNode:
    handler = _OMML_HANDLERS.get(_omml_local_name(element.tag), _parse_children)
    return handler(element)


def _to_element(source: Union[str, bytes]) -> Any:
    if isinstance(source, bytes):
        source = source.decode("utf-8", errors="replace")
    fragment = _XML_DECLARATION.sub("", source, count=1)
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)
    return etree.fromstring(_FRAGMENT_WRAPPER.format(fragment).encode("utf-8"), parser)


def parse_omml(source: Union[str, bytes, Any]) -> MathNode:
    """Parse an OMML fragment into an expression tree.

    Parameters
    ----------
    source : str, bytes or lxml element
        Serialized OMML (namespace declarations optional) or an element
        already parsed by lxml, typically ``m:oMath`` or ``m:oMathPara``

    Returns
    -------
    MathNode
        Parsed tree; an empty ``MathSequence`` when nothing usable was found

    Examples
    --------
        >>> parse_omml("<m:f><m:num>1</m:num><m:den>2</m:den></m:f>")
        MathFraction(num=MathText(text='1'), den=MathText(text='2'), no_bar=False)

    """
    if isinstance(source, (str, bytes)):
        try:
            root = _to_element(source)
        except etree.XMLSyntaxError as e:
            logger.debug(f"Could not parse equation markup: {e}")
            return EMPTY
        if root is None:
            logger.debug("Equation markup produced no elements")
            return EMPTY
        return _parse_children(root)
    return _parse_element(source)


# ---------------------------------------------------------------------------
# Unicode rendering
# ---------------------------------------------------------------------------

_SUPERSCRIPTS = str.maketrans(
    {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "+": "⁺",
        "-": "⁻",
        "=": "⁼",
        "(": "⁽",
        ")": "⁾",
        "n": "ⁿ",
        "i": "ⁱ",
    }
)

_SUBSCRIPTS = str.maketrans(
    {
        "0": "₀",
        "1": "₁",
        "2": "₂",
        "3": "₃",
        "4": "₄",
        "5": "₅",
        "6": "₆",
        "7": "₇",
        "8": "₈",
        "9": "₉",
        "+": "₊",
        "-": "₋",
        "=": "₌",
        "(": "₍",
        ")": "₎",
        "a": "ₐ",
        "e": "ₑ",
        "h": "ₕ",
        "i": "ᵢ",
        "j": "ⱼ",
        "k": "ₖ",
        "l": "ₗ",
        "m": "ₘ",
        "n": "ₙ",
        "o": "ₒ",
        "p": "ₚ",
        "r": "ᵣ",
        "s": "ₛ",
        "t": "ₜ",
        "u": "ᵤ",
        "v": "ᵥ",
        "x": "ₓ",
    }
)

_VULGAR_FRACTIONS = {
    ("1", "2"): "½",
    ("1", "4"): "¼",
    ("3", "4"): "¾",
    ("1", "3"): "⅓",
    ("2", "3"): "⅔",
    ("1", "5"): "⅕",
    ("1", "8"): "⅛",
}

_ROOT_GLYPHS = {"3": "∛", "4": "∜"}


def to_superscript(text: str) -> str:
    """Substitute superscript code points; characters without one are kept.

    Examples
    --------
        >>> to_superscript("10")
        '¹⁰'

    """
    return text.translate(_SUPERSCRIPTS)


def to_subscript(text: str) -> str:
    """Substitute subscript code points; characters without one are kept.

    Examples
    --------
        >>> to_subscript("n-k")
        'ₙ₋ₖ'

    """
    return text.translate(_SUBSCRIPTS)


def to_unicode(node: MathNode) -> str:
    """Render an expression tree as plain Unicode text."""
    if isinstance(node, MathText):
        return node.text
    if isinstance(node, MathSequence):
        return "".join(to_unicode(item) for item in node.items)
    if isinstance(node, MathSuperscript):
        return to_unicode(node.base) + to_superscript(to_unicode(node.sup))
    if isinstance(node, MathSubscript):
        return to_unicode(node.base) + to_subscript(to_unicode(node.sub))
    if isinstance(node, MathFraction):
        num = to_unicode(node.num).strip()
        den = to_unicode(node.den).strip()
        if node.no_bar:
            return f"({num} {den})"
        return _VULGAR_FRACTIONS.get((num, den), f"({num}⁄{den})")
    if isinstance(node, MathNary):
        sub = to_subscript(to_unicode(node.sub)) if node.sub is not None else ""
        sup = to_superscript(to_unicode(node.sup)) if node.sup is not None else ""
        return f"{node.operator}{sub}{sup}{to_unicode(node.base)}"
    if isinstance(node, MathDelimiter):
        return f"({to_unicode(node.content)})"
    if isinstance(node, MathRadical):
        base = to_unicode(node.base)
        if len(base) > 1:
            base = f"({base})"
        degree = to_unicode(node.degree).strip() if node.degree is not None else ""
        if not degree or degree == "2":
            return f"√{base}"
        if degree in _ROOT_GLYPHS:
            return f"{_ROOT_GLYPHS[degree]}{base}"
        return f"{to_superscript(degree)}√{base}"
    if isinstance(node, MathFunction):
        return f"{node.name} {to_unicode(node.argument)}".strip()
    return ""


# ---------------------------------------------------------------------------
# LaTeX rendering
# ---------------------------------------------------------------------------

_LATEX_SYMBOLS = {
    "π": "\\pi ",
    "α": "\\alpha ",
    "β": "\\beta ",
    "γ": "\\gamma ",
    "Γ": "\\Gamma ",
    "δ": "\\delta ",
    "Δ": "\\Delta ",
    "θ": "\\theta ",
    "λ": "\\lambda ",
    "μ": "\\mu ",
    "σ": "\\sigma ",
    "Σ": "\\Sigma ",
    "φ": "\\phi ",
    "ω": "\\omega ",
    "Ω": "\\Omega ",
    "∞": "\\infty ",
    "±": "\\pm ",
    "×": "\\times ",
    "÷": "\\div ",
    "≤": "\\leq ",
    "≥": "\\geq ",
    "≠": "\\neq ",
    "≈": "\\approx ",
    "∈": "\\in ",
    "∉": "\\notin ",
    "⊂": "\\subset ",
    "⊃": "\\supset ",
    "∪": "\\cup ",
    "∩": "\\cap ",
    "∅": "\\emptyset ",
    "√": "\\sqrt",
}

_LATEX_OPERATORS = {
    "∑": "\\sum",
    "∫": "\\int",
    "∬": "\\iint",
    "∭": "\\iiint",
    "∮": "\\oint",
    "∏": "\\prod",
    "⋃": "\\bigcup",
    "⋂": "\\bigcap",
}


def _latex_text(text: str) -> str:
    return "".join(_LATEX_SYMBOLS.get(char, char) for char in text)


def _render_latex(node: Optional[MathNode]) -> str:
    if node is None:
        return ""
    if isinstance(node, MathText):
        return _latex_text(node.text)
    if isinstance(node, MathSequence):
        return "".join(_render_latex(item) for item in node.items)
    if isinstance(node, MathSuperscript):
        return f"{_render_latex(node.base)}^{{{_render_latex(node.sup).strip()}}}"
    if isinstance(node, MathSubscript):
        return f"{_render_latex(node.base)}_{{{_render_latex(node.sub).strip()}}}"
    if isinstance(node, MathFraction):
        command = "\\binom" if node.no_bar else "\\frac"
        return f"{command}{{{_render_latex(node.num).strip()}}}{{{_render_latex(node.den).strip()}}}"
    if isinstance(node, MathNary):
        result = _LATEX_OPERATORS.get(node.operator, "\\sum")
        if node.sub is not None:
            result += f"_{{{_render_latex(node.sub).strip()}}}"
        if node.sup is not None:
            result += f"^{{{_render_latex(node.sup).strip()}}}"
        base = _render_latex(node.base).strip()
        return f"{result} {base}" if base else result
    if isinstance(node, MathDelimiter):
        return f"\\left({_render_latex(node.content).strip()}\\right)"
    if isinstance(node, MathRadical):
        degree = _render_latex(node.degree).strip()
        prefix = f"\\sqrt[{degree}]" if degree and degree != "2" else "\\sqrt"
        return f"{prefix}{{{_render_latex(node.base).strip()}}}"
    if isinstance(node, MathFunction):
        name = f"\\{node.name}" if node.name.isalpha() else node.name
        argument = _render_latex(node.argument).strip()
        return f"{name} {argument}" if argument else name
    return ""


def to_latex(node: MathNode) -> str:
    """Render an expression tree as LaTeX source.

    Examples
    --------
        >>> to_latex(MathFraction(num=MathText("a"), den=MathText("b")))
        '\\\\frac{a}{b}'

    """
    return _render_latex(node).strip()


def fallback_text(node: Optional[MathNode]) -> str:
    """Concatenate the leaf text of an expression tree, ignoring structure."""
    if node is None:
        return ""
    if isinstance(node, MathText):
        return node.text
    if isinstance(node, MathSequence):
        return "".join(fallback_text(item) for item in node.items)
    if isinstance(node, MathSuperscript):
        return fallback_text(node.base) + fallback_text(node.sup)
    if isinstance(node, MathSubscript):
        return fallback_text(node.base) + fallback_text(node.sub)
    if isinstance(node, MathFraction):
        return fallback_text(node.num) + fallback_text(node.den)
    if isinstance(node, MathNary):
        return fallback_text(node.sub) + fallback_text(node.sup) + fallback_text(node.base)
    if isinstance(node, MathDelimiter):
        return fallback_text(node.content)
    if isinstance(node, MathRadical):
        return fallback_text(node.degree) + fallback_text(node.base)
    if isinstance(node, MathFunction):
        return node.name + fallback_text(node.argument)
    return ""


def render_equation(source: Union[str, bytes, Any]) -> ParsedEquation:
    """Parse OMML and produce every rendering at once.

    Parameters
    ----------
    source : str, bytes or lxml element
        OMML to render

    Returns
    -------
    ParsedEquation
        LaTeX, plain-text fallback and Unicode renderings. When the LaTeX
        rendering comes out empty the fallback text is used in its place.

    """
    tree = parse_omml(source)
    fallback = fallback_text(tree)
    latex = to_latex(tree) or fallback
    return ParsedEquation(latex=latex, fallback=fallback, unicode=to_unicode(tree))
