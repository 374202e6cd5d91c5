"""In-memory typeahead fulltext index package."""

from .errors import FulltextError, InvalidInputError, InsufficientQueryError, SearchCancelledError
from .posting import PostingIndex, extract_ngrams
from .service import Document, IndexService
from .tokenizer import tokenize
from .verifier import PrefixVerifier
