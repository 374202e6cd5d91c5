"""
Analyzer for the typeahead index.
Turns raw text into lowercase ASCII word tokens, and extracts visible text
from HTML documents for the loader.

The same function must be used at index time and at query time: posting
removal re-tokenizes the prior text of a document.
"""

import re
import warnings
from pathlib import Path
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.tokenize import wordpunct_tokenize
from unidecode import unidecode

# Characters treated as word separators before tokenization
_DELIMITERS = str.maketrans({"-": " ", "_": " ", ":": " ", "|": " "})
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_text(text: str) -> str:
    """
    Fold text to lowercase ASCII and turn delimiters into spaces.
    (eg. "Café-Crème" -> "cafe creme")
    """
    if not text:
        return ""
    return unidecode(text).lower().translate(_DELIMITERS)


def tokenize(text: str) -> list[str]:
    """
    Tokenize text into words. Uses NLTK's wordpunct_tokenize, which is a pure
    regex tokenizer and needs no downloaded models.
    Returns lowercase, alphanumeric-only tokens (length >= 1).
    """
    normalized = normalize_text(text)
    if not normalized.strip():
        return []
    # Strip to alphanumeric only (drops punctuation tokens like "'", ",")
    tokens = [_NON_ALNUM.sub("", w) for w in wordpunct_tokenize(normalized)]
    return [t for t in tokens if t]


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    # Remove script and style elements
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def read_html_file(filepath: Path) -> str:
    """
    Read HTML file content, handling common encodings.
    """
    for encoding in ("utf-8", "latin-1", "cp1252"):
        try:
            return Path(filepath).read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not decode file: {filepath}")
