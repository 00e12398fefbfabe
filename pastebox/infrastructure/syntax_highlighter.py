"""
Syntax Highlighter

Formats text objects as highlighted HTML with Pygments.
A style or formatter name that Pygments does not know falls back to
the built-in default instead of failing the request.
"""

import codecs
import logging
from pathlib import Path

from pygments import highlight
from pygments.formatter import Formatter
from pygments.formatters import get_formatter_by_name
from pygments.formatters.html import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.style import Style
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from pastebox.domain.errors import StorageIOError

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "autumn"
DEFAULT_FORMATTER = "html"
FALLBACK_STYLE = "default"
OUTPUT_ENCODING = "utf-8"
LEGACY_ENCODING = "cp1252"

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


class PygmentsHighlighter:
    """
    Renders source bytes into a standalone highlighted HTML page.

    The style and formatter are resolved once at construction.
    """

    def __init__(self, style_name: str = DEFAULT_STYLE, formatter_name: str = DEFAULT_FORMATTER):
        self.style = resolve_style(style_name)
        self.formatter_name = formatter_name
        # Probe the formatter name up front so a typo is logged at startup.
        self._build_formatter("")

    def highlight_file(self, path: Path) -> bytes:
        """
        Highlight the file at ``path``, choosing the lexer by filename.

        Raises:
            StorageIOError: If the file cannot be read
        """
        try:
            source = path.read_bytes()
        except OSError as e:
            raise StorageIOError(f"Could not read {path.name}: {e}", e) from e
        return self.highlight_source(source, path.name)

    def highlight_source(self, source: bytes, filename: str) -> bytes:
        code = decode_source(source)
        lexer = resolve_lexer(filename, code)
        formatter = self._build_formatter(filename)
        return highlight(code, lexer, formatter)

    def _build_formatter(self, title: str) -> Formatter:
        options = {
            "style": self.style,
            "full": True,
            "title": title,
            "encoding": OUTPUT_ENCODING,
        }
        try:
            return get_formatter_by_name(self.formatter_name, **options)
        except ClassNotFound:
            logger.warning(
                f"Formatter '{self.formatter_name}' not available, using HTML fallback"
            )
            self.formatter_name = DEFAULT_FORMATTER
            return HtmlFormatter(**options)


def decode_source(source: bytes) -> str:
    """
    Text of a stored object.

    UTF-16 when a byte order mark says so, then UTF-8 (BOM optional),
    then Windows-1252 with Latin-1 for the bytes it leaves undefined.
    """
    if source.startswith(_UTF16_BOMS):
        return source.decode("utf-16", errors="replace")
    try:
        return source.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    try:
        return source.decode(LEGACY_ENCODING)
    except UnicodeDecodeError:
        return source.decode("latin-1")


def resolve_style(style_name: str) -> type[Style]:
    try:
        return get_style_by_name(style_name)
    except ClassNotFound:
        logger.warning(f"Style '{style_name}' not available, using '{FALLBACK_STYLE}'")
        return get_style_by_name(FALLBACK_STYLE)


def resolve_lexer(filename: str, code: str) -> Lexer:
    try:
        return get_lexer_for_filename(filename, code)
    except ClassNotFound:
        return TextLexer()
