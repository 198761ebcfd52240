"""Parse SGF data into a tree of raw properties.

This is intended for use with SGF FF[4]; see http://www.red-bean.com/sgf/

Nothing in this module is Go-specific.

The grammar, from the SGF FF[4] definition:

    Collection = GameTree { GameTree }
    GameTree   = "(" Sequence { GameTree } ")"
    Sequence   = Node { Node }
    Node       = ";" { Property }
    Property   = PropIdent PropValue { PropValue }
    PropIdent  = UcLetter { UcLetter }
    PropValue  = "[" CValueType "]"

The parser is a hand-written state machine working directly on the string.
It never backtracks: each state transition moves the cursor forward, so the
time taken is linear in the length of the input.

"""

import enum
import logging

logger = logging.getLogger(__name__)

STRUCTURAL_DELIMITERS = ";()"

# The same set as C's isspace() in the "C" locale
_whitespace = " \t\n\r\f\v"


class Sgf_error(ValueError):
    """Error raised when SGF data can't be parsed or interpreted.

    Public attributes:
      messages -- nonempty list of strings

    The first message describes the problem which was detected; any later
    ones describe what was being attempted at the time.

    str() of the exception gives the messages separated by newlines.

    """
    def __init__(self, *messages):
        ValueError.__init__(self, "\n".join(messages))
        self.messages = list(messages)

    def with_context(self, message):
        """Return a new Sgf_error with an extra message at the end."""
        log_error(message)
        return Sgf_error(*(self.messages + [message]))

def log_error(message, log=None):
    """Log a parse or interpretation failure at WARNING level.

    log -- logging.Logger to use (default this module's logger)

    """
    (log or logger).warning("SGF parser error: %s", message)

def make_error(message, log=None):
    """Log a failure (see log_error()) and return an Sgf_error for it."""
    log_error(message, log)
    return Sgf_error(message)


class Property(object):
    """An SGF property, as found in the source text.

    Public attributes:
      identifier -- string
      values     -- list of raw values (strings)

    The identifier is the text before the first value, with surrounding
    whitespace removed. It isn't checked or case-normalised.

    A raw value is the exact text between the square brackets: backslash
    escapes and line endings are left untouched.

    """
    __slots__ = ('identifier', 'values')

    def __init__(self, identifier, values=None):
        self.identifier = identifier
        if values is None:
            values = []
        self.values = values

    def __eq__(self, other):
        if not isinstance(other, Property):
            return NotImplemented
        return (self.identifier == other.identifier and
                self.values == other.values)

    def __repr__(self):
        return "<Property %s: %r>" % (self.identifier, self.values)


class Game_tree(object):
    """An SGF GameTree.

    This is a direct representation of the SGF parse tree. The 'children'
    represent variations, not individual nodes.

    Public attributes
      parent   -- Game_tree, or None for a tree at the top of a collection
      sequence -- list of nodes
      children -- list of Game_trees

    A node is a list of Property objects, in the order they appear in the
    source.

    The sequence represents the nodes before the variations. In a tree
    returned by parse_to_collection() it is never empty.

    Make child trees using new_child(), which sets the back reference.

    """
    def __init__(self, parent=None):
        self.parent = parent
        self.sequence = []
        self.children = []

    def new_child(self):
        """Create a new variation at the end of this tree's children."""
        child = Game_tree(self)
        self.children.append(child)
        return child

    def new_node(self):
        """Append a new empty node to the sequence, and return it."""
        node = []
        self.sequence.append(node)
        return node


def _strip(s, start, end):
    return s[start:end].strip(_whitespace)

def find_first(s, start, targets, expect_contents):
    """Find the first unescaped occurrence of any of a set of characters.

    s               -- string
    start           -- index into 's'
    targets         -- string of characters to look for
    expect_contents -- bool

    Returns an index into 's', or None if there is no match.

    A backslash escapes the character following it: that character is never
    treated as a target.

    If 'expect_contents' is false, only whitespace is permitted before the
    target; the search returns None as soon as it sees anything else.

    """
    escaping = False
    for i in range(start, len(s)):
        if escaping:
            escaping = False
            continue
        c = s[i]
        if c == "\\":
            escaping = True
        elif c in targets:
            return i
        elif not expect_contents and c not in _whitespace:
            return None
    return None


class Node_state(enum.Enum):
    NODE_START = 1      #  '['            -->  VALUE_START
                        #  ';' '(' ')'    -->  (empty node)
    VALUE_START = 2     #  ']'            -->  NEXT_VALUE
    NEXT_VALUE = 3      #  '['            -->  VALUE_START
                        #  ';' '(' ')'    -->  (end of node)

def consume_node(s, start, node):
    """Parse the properties of a single node.

    s     -- string
    start -- index into 's' just after the node's ';'
    node  -- list to append Property objects to

    Returns the index of the delimiter (';', '(', or ')') which ends the node.

    Raises Sgf_error if the node is malformed.

    A PropIdent followed by several PropValues gives a single Property with
    several values. A PropIdent which is repeated in the same node gives a
    second Property; the two aren't merged.

    """
    state = Node_state.NODE_START
    cursor = start
    current_property = None
    while True:
        if state is Node_state.NODE_START:
            p = find_first(s, cursor, "[" + STRUCTURAL_DELIMITERS, True)
            if p is not None and s[p] != "[" and not _strip(s, cursor, p):
                return p
            if p is None or s[p] != "[":
                raise make_error("reached the end of a node without finding "
                                "a property value (at position %d)" % cursor)
            current_property = Property(_strip(s, cursor, p))
            node.append(current_property)
            state = Node_state.VALUE_START
        elif state is Node_state.VALUE_START:
            p = find_first(s, cursor, "]", True)
            if p is None:
                raise make_error("missing the end of a property value "
                                "(value starts at position %d)" % cursor)
            current_property.values.append(s[cursor:p])
            state = Node_state.NEXT_VALUE
        else:
            # state is Node_state.NEXT_VALUE
            p = find_first(s, cursor, "[" + STRUCTURAL_DELIMITERS, True)
            if p is None:
                raise make_error(
                    "missing the end of a node "
                    "(last value ends at position %d)" % (cursor-1))
            gap = _strip(s, cursor, p)
            if s[p] == "[":
                if gap:
                    current_property = Property(gap)
                    node.append(current_property)
                state = Node_state.VALUE_START
            else:
                if gap:
                    raise make_error("non-empty contents after the end of "
                                    "a value (at position %d)" % cursor)
                return p
        cursor = p + 1


class Tree_state(enum.Enum):
    START = 0           #  '('            -->  TREE_START
    TREE_START = 1      #  ';'            -->  NODE_START
    NODE_START = 2      #  ';'            -->  NODE_START
                        #  '('            -->  TREE_START
                        #  ')'            -->  NEXT_TREE
    NEXT_TREE = 3       #  '('            -->  TREE_START
                        #  ')'            -->  NEXT_TREE
                        #  end of data    -->  END
    END = 4

def _go_up(tree, position):
    if tree.parent is None:
        raise make_error("trying to go up in the root tree (at position %d)"
                        % position)
    return tree.parent

def parse_to_collection(s):
    """Parse an SGF collection, returning the game trees.

    s -- string

    Returns a nonempty list of Game_trees, with parent None.

    Raises Sgf_error if the string isn't a well-formed collection.

    Only whitespace is permitted before the first game and between games.
    Anything following the final game is ignored.

    Doesn't check property identifiers or values.

    """
    root = Game_tree()
    current_tree = root
    state = Tree_state.START
    cursor = 0
    while state is not Tree_state.END:
        logger.debug("%s at position %d", state.name, cursor)
        if state is Tree_state.START:
            p = find_first(s, cursor, "(", False)
            if p is None:
                raise make_error("failed in finding a tree start")
            current_tree = current_tree.new_child()
            state = Tree_state.TREE_START
        elif state is Tree_state.TREE_START:
            p = find_first(s, cursor, ";", False)
            if p is None:
                raise make_error("failed in finding a node start "
                                "(tree starts at position %d)" % (cursor-1))
            state = Tree_state.NODE_START
        elif state is Tree_state.NODE_START:
            try:
                p = consume_node(s, cursor, current_tree.new_node())
            except Sgf_error as e:
                raise e.with_context("error in parsing a node "
                                     "(node starts at position %d)"
                                     % (cursor-1))
            if s[p] == "(":
                current_tree = current_tree.new_child()
                state = Tree_state.TREE_START
            elif s[p] == ")":
                current_tree = _go_up(current_tree, p)
                state = Tree_state.NEXT_TREE
        else:
            # state is Tree_state.NEXT_TREE
            p = find_first(s, cursor, "()", False)
            if p is None:
                state = Tree_state.END
                continue
            if s[p] == "(":
                current_tree = current_tree.new_child()
                state = Tree_state.TREE_START
            else:
                current_tree = _go_up(current_tree, p)
        cursor = p + 1

    if current_tree is not root:
        raise make_error("parser ends with a bad state (unclosed game tree)")
    trees = root.children
    for tree in trees:
        tree.parent = None
    return trees


def describe_trees(trees):
    """Describe a list of Game_trees, for debugging.

    Returns a list of strings (lines, without newlines).

    """
    lines = []
    to_describe = [(tree, 0) for tree in reversed(trees)]
    while to_describe:
        tree, level = to_describe.pop()
        indent = "  " * level
        lines.append("%sA tree at level %d" % (indent, level))
        for i, node in enumerate(tree.sequence):
            lines.append("%s Node #%d" % (indent, i))
            for prop in node:
                lines.append("%s  Prop ID=%s, Values=%s" % (
                    indent, prop.identifier, ",".join(prop.values)))
        lines.append("%sSubtrees:" % indent)
        to_describe.extend(
            (child, level+1) for child in reversed(tree.children))
    return lines

def dump_trees(trees):
    """Log a description of a list of Game_trees at INFO level."""
    for line in describe_trees(trees):
        logger.info("%s", line)


def get_furthest_leaf(game_tree):
    """Find the leaf with the longest path from a Game_tree.

    Returns a pair (leaf Game_tree, number of nodes)

    The number of nodes is the total length of the sequences from
    'game_tree' down to the leaf, inclusive.

    If several leaves are equally far, returns the first in document order.

    """
    furthest_leaf = None
    longest_distance = -1
    to_visit = [(game_tree, 0)]
    while to_visit:
        tree, distance = to_visit.pop()
        distance += len(tree.sequence)
        if not tree.children:
            if distance > longest_distance:
                furthest_leaf = tree
                longest_distance = distance
            continue
        to_visit.extend((child, distance) for child in reversed(tree.children))
    return furthest_leaf, longest_distance

def get_path(game_tree):
    """Return the chain of Game_trees from the top of the collection.

    Returns a list of Game_trees, starting with the tree whose parent is
    None and ending with 'game_tree'.

    """
    path = []
    while game_tree is not None:
        path.append(game_tree)
        game_tree = game_tree.parent
    path.reverse()
    return path

def path_node_iter(game_tree):
    """Provide the nodes on the path down to a Game_tree.

    Returns an iterable of nodes, in document order, from the top of the
    collection to the end of the sequence of 'game_tree'.

    """
    for tree in get_path(game_tree):
        for node in tree.sequence:
            yield node
