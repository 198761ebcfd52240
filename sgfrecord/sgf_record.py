"""Interpret a parsed SGF game as a flat Go game record.

This is intended for use with SGF FF[4]; see http://www.red-bean.com/sgf/

Only a fixed set of properties is interpreted (see _properties below); all
others are passed back to the caller as 'unparsed' (identifier, values)
pairs.

Points are pairs (x, y), with x = column and y = row counting from 0 at the
point SGF writes as 'aa'. They aren't checked against the board size.

"""

import logging
import re

from sgfrecord.sgfrecord_common import *
from sgfrecord import sgf_grammar

logger = logging.getLogger(__name__)

# Value of Game_record.result (with the sign of the winner) for a win by
# resignation, time, or forfeit.
RESIGNED_RESULT = 1.2

LENIENT_TIMELIMIT = 0
LENIENT_KOMI = 6.5

def _error(message):
    return sgf_grammar.make_error(message, logger)


class Move(object):
    """A move from a game record.

    Public attributes:
      colour  -- 'b' or 'w'
      is_pass -- bool
      point   -- pair (x, y), or None for a pass

    """
    __slots__ = ('colour', 'is_pass', 'point')

    def __init__(self, colour, point):
        self.colour = colour
        self.is_pass = (point is None)
        self.point = point

    def __eq__(self, other):
        if not isinstance(other, Move):
            return NotImplemented
        return (self.colour == other.colour and self.point == other.point)

    def __repr__(self):
        return "<Move %s %s>" % (colour_letter(self.colour),
                                 format_point(self.point))


class Game_record(object):
    """Flat description of a Go game.

    Public attributes:
      board_width   -- int (SZ)
      board_height  -- int (SZ)
      komi          -- float (KM)
      handicap      -- int (HA)
      timelimit     -- int (TM): seconds; -1 means unknown
      black_stones  -- list of points (AB)
      white_stones  -- list of points (AW)
      moves         -- list of Move objects (B and W)
      result        -- float (RE): positive means black won by this margin
      resigned      -- bool (RE): the game ended by resignation, time, or
                       forfeit; 'result' is then +/- RESIGNED_RESULT
      black_name    -- string (PB or BT)
      black_rank    -- string (BR)
      white_name    -- string (PW or WT)
      white_rank    -- string (WR)
      date          -- string (DT)
      rule          -- string (RU)

    The string attributes hold raw SGF values (backslash escapes are left in).

    """
    def __init__(self):
        self.reset()

    def reset(self):
        """Reset all attributes to their default values."""
        self.board_width = 0
        self.board_height = 0
        self.komi = 0.0
        self.handicap = 0
        self.timelimit = -1
        self.black_stones = []
        self.white_stones = []
        self.moves = []
        self.result = 0.0
        self.resigned = False
        self.black_name = ""
        self.black_rank = ""
        self.white_name = ""
        self.white_rank = ""
        self.date = ""
        self.rule = ""

    def describe_result(self):
        """Return a short description of the result, like 'B+3.5'.

        Returns None if the result is unknown.

        """
        if self.result == 0:
            return None
        if self.result > 0:
            winner = "B"
        else:
            winner = "W"
        if self.resigned:
            return "%s+R" % winner
        return "%s+%g" % (winner, abs(self.result))

    def debug_string(self):
        """Return a multi-line description of the record, for debugging."""
        lines = []
        lines.append("Board Size: [%d*%d]  Komi: %g  Handicap: %d  "
                     "Time limit: %d seconds." % (
                         self.board_width, self.board_height, self.komi,
                         self.handicap, self.timelimit))
        lines.append("Black: %s Rank: %s  White: %s Rank: %s" % (
            self.black_name, self.black_rank,
            self.white_name, self.white_rank))
        if self.result > 0:
            winner = "B"
        else:
            winner = "W"
        if self.resigned:
            margin = "resigned"
        else:
            margin = "+%g" % abs(self.result)
        lines.append("Date: %s  Rule: %s  Result: %s wins by %s" % (
            self.date, self.rule, winner, margin))
        if self.black_stones:
            lines.append("Black stones: " +
                         format_point_list(self.black_stones))
        if self.white_stones:
            lines.append("White stones: " +
                         format_point_list(self.white_stones))
        lines.append("Moves:")
        lines.append(" ".join(
            "%s %s" % (colour_letter(move.colour),
                       "passed" if move.is_pass else format_point(move.point))
            for move in self.moves))
        return "\n".join(lines)


class Extraction_settings(object):
    """Settings for extract_record().

    Public attributes:
      lenient -- bool (default False)

    If 'lenient' is true, a TM or KM value which can't be interpreted is
    replaced by a default (LENIENT_TIMELIMIT or LENIENT_KOMI) and a warning
    is logged. Otherwise it's an error.

    """
    def __init__(self, lenient=False):
        self.lenient = lenient

    def __repr__(self):
        return "<Extraction_settings lenient=%s>" % self.lenient


_number_re = re.compile(r"\A\s*[-+]?[0-9]+\s*\Z")

def interpret_number(s):
    """Convert a raw Number value to the integer it represents.

    Surrounding whitespace is permitted.

    """
    if not _number_re.search(s):
        raise ValueError("not an integer")
    return int(s)

def interpret_real(s):
    """Convert a raw Real value to the float it represents.

    This is more lenient than the SGF spec: it accepts strings accepted as a
    float by Python (apart from ones using underscores as digit separators).

    """
    if "_" in s:
        raise ValueError("not a number")
    return float(s)

def interpret_string(s):
    """Return a raw value unchanged.

    Backslash escapes and line breaks are left as they are in the SGF data.

    """
    return s

def interpret_point(s):
    """Convert a raw SGF Point or Stone value to coordinates.

    Returns a pair (x, y).

    Raises ValueError if the value isn't two characters long.

    Letters are case-insensitive. The coordinates aren't range-checked, so
    they're only meaningful for board sizes up to 26.

    """
    lower = s.lower()
    if len(lower) != 2:
        raise ValueError("bad coordinate")
    return ord(lower[0]) - 97, ord(lower[1]) - 97 # 97 == ord("a")

def interpret_move(s):
    """Convert a raw SGF Move value to coordinates.

    Returns a pair (x, y), or None for a pass.

    Only the empty string is treated as a pass ('tt' is an ordinary point).

    """
    if s == "":
        return None
    return interpret_point(s)

_resignation_results = {
    "B+R" : RESIGNED_RESULT, "B+T" : RESIGNED_RESULT, "B+F" : RESIGNED_RESULT,
    "W+R" : -RESIGNED_RESULT, "W+T" : -RESIGNED_RESULT,
    "W+F" : -RESIGNED_RESULT,
    }

def interpret_result(s):
    """Interpret an RE (result) property value.

    Returns a pair (result, resigned)

      result   -- float: positive means a win for black
      resigned -- bool

    A win by resignation, time, or forfeit ('B+R', 'W+Time', ...) gives
    +/- RESIGNED_RESULT and resigned True.

    Otherwise the value must be 'B' or 'W' followed by one character
    (normally '+') and the winning margin.

    Raises ValueError for anything else (including draws and unknown
    results).

    """
    result = s.upper()
    if result[:3] in _resignation_results:
        return _resignation_results[result[:3]], True
    if len(result) < 3:
        raise ValueError("value too short")
    try:
        score = interpret_real(result[2:])
    except ValueError:
        raise ValueError("failed in parsing score")
    if result[0] == "B":
        return score, False
    if result[0] == "W":
        return -score, False
    raise ValueError("unknown color")


def _setter(*attributes):
    def store(record, value):
        for attribute in attributes:
            setattr(record, attribute, value)
    return store

def _appender(attribute):
    def store(record, value):
        getattr(record, attribute).append(value)
    return store

def _move_appender(colour):
    def store(record, point):
        record.moves.append(Move(colour, point))
    return store

def _store_result(record, value):
    record.result, record.resigned = value

class _Property(object):
    """Description of a property which updates a Game_record.

    description     -- string used in error messages
    interpreter     -- function converting a raw value to a Python value,
                       raising ValueError if it can't
    store           -- function (Game_record, Python value)
    uses_list       -- bool: property may have any number of values, each
                       interpreted and stored in turn (otherwise there must
                       be exactly one)
    lenient_default -- Python value to store instead of a bad value, when
                       extracting leniently (None: bad values are always
                       errors)

    """
    def __init__(self, description, interpreter, store,
                 uses_list=False, lenient_default=None):
        self.description = description
        self.interpreter = interpreter
        self.store = store
        self.uses_list = uses_list
        self.lenient_default = lenient_default

    def interpret(self, identifier, s, settings):
        try:
            return self.interpreter(s)
        except ValueError as e:
            if settings.lenient and self.lenient_default is not None:
                logger.warning("cannot parse %s value '%s'; using %s",
                               identifier, s, self.lenient_default)
                return self.lenient_default
            msg = "bad %s value: '%s'" % (self.description, s)
            if str(e):
                msg += ": %s" % e
            raise _error(msg)

    def apply(self, identifier, values, record, settings):
        if self.uses_list:
            for s in values:
                self.store(record, self.interpret(identifier, s, settings))
            return
        if len(values) != 1:
            raise _error("bad %s property: expected a single value, found %d"
                         % (self.description, len(values)))
        self.store(record, self.interpret(identifier, values[0], settings))

P = _Property
LIST = True
_properties = {
  'SZ' : P("SZ", interpret_number, _setter('board_width', 'board_height')),
  'HA' : P("HA", interpret_number, _setter('handicap')),
  'TM' : P("TM", interpret_number, _setter('timelimit'),
           lenient_default=LENIENT_TIMELIMIT),
  'KM' : P("komi (KM)", interpret_real, _setter('komi'),
           lenient_default=LENIENT_KOMI),
  'RU' : P("rule (RU)", interpret_string, _setter('rule')),
  'PB' : P("black name", interpret_string, _setter('black_name')),
  'BT' : P("black name", interpret_string, _setter('black_name')),
  'PW' : P("white name", interpret_string, _setter('white_name')),
  'WT' : P("white name", interpret_string, _setter('white_name')),
  'BR' : P("black rank", interpret_string, _setter('black_rank')),
  'WR' : P("white rank", interpret_string, _setter('white_rank')),
  'DT' : P("date (DT)", interpret_string, _setter('date')),
  'RE' : P("result (RE)", interpret_result, _store_result),
  'AB' : P("AB", interpret_point, _appender('black_stones'), LIST),
  'AW' : P("AW", interpret_point, _appender('white_stones'), LIST),
  'B'  : P("B", interpret_move, _move_appender('b'), LIST),
  'W'  : P("W", interpret_move, _move_appender('w'), LIST),
  }

def is_interpreted(identifier):
    """Check whether a property identifier is interpreted by this module.

    The check is case-insensitive.

    """
    return identifier.upper() in _properties


def handle_property(prop, record, unparsed, settings):
    """Apply a single property to a Game_record.

    prop     -- sgf_grammar.Property
    record   -- Game_record (updated in place)
    unparsed -- list (updated in place)
    settings -- Extraction_settings

    Identifiers are case-insensitive. For an identifier that isn't
    interpreted, appends a pair (upper-cased identifier, comma-joined raw
    values) to 'unparsed'.

    Raises Sgf_error if the property has the wrong number of values, or a
    value that can't be interpreted.

    """
    identifier = prop.identifier.upper()
    try:
        property_type = _properties[identifier]
    except KeyError:
        unparsed.append((identifier, ",".join(prop.values)))
        return
    property_type.apply(identifier, prop.values, record, settings)

def extract_record(trees, settings=None, record=None):
    """Build a Game_record from a collection of parsed game trees.

    trees    -- list of sgf_grammar.Game_trees (see parse_to_collection())
    settings -- Extraction_settings (default strict)
    record   -- Game_record to update (default a new one)

    Returns a pair (Game_record, unparsed)

      unparsed -- list of pairs (identifier, comma-joined raw values)

    The collection must contain exactly one game.

    Uses a single path through the game: the one leading to the leaf with
    the most nodes from the root (the first in document order if there is a
    tie). Properties are applied in document order along that path.

    Raises Sgf_error if the collection has no games or several games, or if
    handle_property() fails; 'record' may then have been partly updated.

    """
    if settings is None:
        settings = Extraction_settings()
    if record is None:
        record = Game_record()
    if not trees:
        raise _error("empty tree collection")
    if len(trees) > 1:
        raise _error("multiple trees unsupported (found %d games)"
                     % len(trees))
    leaf, node_count = sgf_grammar.get_furthest_leaf(trees[0])
    logger.debug("extracting path of %d nodes", node_count)
    unparsed = []
    for node in sgf_grammar.path_node_iter(leaf):
        for prop in node:
            handle_property(prop, record, unparsed, settings)
    return record, unparsed
