from mailweaver.stylesheet.extractor import StyleRuleExtractor, unquote
from mailweaver.stylesheet.formatter import format_attributes, format_style
from mailweaver.stylesheet.selector import SelectorClassifier, parse_selector
from mailweaver.stylesheet.syntax import CssSyntax, load_css_syntax

__all__ = [
    "StyleRuleExtractor",
    "SelectorClassifier",
    "CssSyntax",
    "format_attributes",
    "format_style",
    "load_css_syntax",
    "parse_selector",
    "unquote",
]
