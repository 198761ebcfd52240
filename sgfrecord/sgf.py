"""Parse SGF game records.

This is intended for use with SGF FF[4]; see http://www.red-bean.com/sgf/

These are the entry points for callers. They never raise for malformed SGF
data: each returns a success flag, and a string describing any errors
(messages separated by newlines, or "" on success). When the flag is false,
the other results must not be used.

See sgf_grammar for the property tree and sgf_record for the game record.

"""

import logging
import re

import chardet

from sgfrecord import sgf_grammar
from sgfrecord import sgf_record
from sgfrecord.sgf_grammar import Sgf_error

logger = logging.getLogger(__name__)


def parse_to_tree_collection(s):
    """Parse SGF data into a list of game trees.

    s -- string

    Returns a tuple (success, trees, errors)

      success -- bool
      trees   -- list of sgf_grammar.Game_trees (empty on failure)
      errors  -- string

    """
    try:
        trees = sgf_grammar.parse_to_collection(s)
    except Sgf_error as e:
        return False, [], str(e)
    return True, trees, ""

def parse_record(s, settings=None):
    """Parse SGF data into a game record.

    s        -- string
    settings -- sgf_record.Extraction_settings (default strict)

    Returns a tuple (success, record, unparsed, errors)

      success  -- bool
      record   -- sgf_record.Game_record (None on failure)
      unparsed -- list of pairs (identifier, comma-joined raw values)
      errors   -- string

    The data must contain a single game. See sgf_record.extract_record()
    for details.

    """
    try:
        trees = sgf_grammar.parse_to_collection(s)
        record, unparsed = sgf_record.extract_record(trees, settings)
    except Sgf_error as e:
        return False, None, [], str(e)
    return True, record, unparsed, ""

def parse_record_and_check(s, expected_board_size=0, check_has_result=False,
                           settings=None):
    """Variant of parse_record() which also checks the record's contents.

    expected_board_size -- int (0 means any size is accepted)
    check_has_result    -- bool: reject games with no (or a zero) result

    Returns a tuple (success, record, unparsed, errors), as parse_record().

    """
    success, record, unparsed, errors = parse_record(s, settings)
    if not success:
        return success, record, unparsed, errors
    if expected_board_size > 0 and (
            record.board_width != expected_board_size or
            record.board_height != expected_board_size):
        msg = "unexpected board size: %dx%d (expected %d)" % (
            record.board_width, record.board_height, expected_board_size)
        sgf_grammar.log_error(msg, logger)
        return False, None, [], msg
    if check_has_result and record.result == 0:
        msg = "the game has an unknown result"
        sgf_grammar.log_error(msg, logger)
        return False, None, [], msg
    return True, record, unparsed, ""


_newline_re = re.compile(r"\n\r|\r\n|\n|\r")
_charset_re = re.compile(br"CA\[(.*?)\]")

def decode_sgf_data(data, encoding=None):
    """Convert SGF file contents to a string.

    data     -- bytes
    encoding -- codec name, or None to choose one

    If no encoding is given, uses the SGF CA property if there is one;
    otherwise guesses using chardet, falling back to UTF-8. A codec which is
    unknown, or which can't be used for decoding, is replaced by UTF-8 with a
    warning.

    Undecodable bytes are replaced with U+FFFD.

    Line endings (LF, CR, LFCR, or CRLF) are converted to \\n.

    """
    if encoding is None:
        m = _charset_re.search(data)
        if m:
            encoding = m.group(1).decode("ascii", "ignore").strip()
        else:
            encoding = chardet.detect(data)["encoding"]
        if not encoding:
            encoding = "UTF-8"
    try:
        s = data.decode(encoding, "replace")
    except (LookupError, ValueError):
        # ValueError covers codecs which refuse "replace" (UnicodeError) and
        # names containing NUL
        logger.warning("unknown encoding '%s'; using UTF-8", encoding)
        s = data.decode("UTF-8", "replace")
    return _newline_re.sub("\n", s)

def read_sgf_file(pathname, encoding=None):
    """Read an SGF file, returning its contents as a string.

    pathname -- filename
    encoding -- codec name, or None to choose one

    See decode_sgf_data() for the treatment of encodings and line endings.

    Propagates OSError if the file can't be read.

    """
    with open(pathname, "rb") as f:
        data = f.read()
    return decode_sgf_data(data, encoding)
