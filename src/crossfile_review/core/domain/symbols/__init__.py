from crossfile_review.core.domain.symbols.recognizers import (
    DialectRecognizer,
    JavaRecognizer,
    KotlinRecognizer,
    recognizer_for,
)
from crossfile_review.core.domain.symbols.symbol import Symbol, SymbolKind, UsageKind, UsedSymbol
from crossfile_review.core.domain.symbols.symbol_extractor import (
    extract_symbols,
    extract_used_symbols,
)

__all__ = [
    "DialectRecognizer",
    "JavaRecognizer",
    "KotlinRecognizer",
    "Symbol",
    "SymbolKind",
    "UsageKind",
    "UsedSymbol",
    "extract_symbols",
    "extract_used_symbols",
    "recognizer_for",
]
