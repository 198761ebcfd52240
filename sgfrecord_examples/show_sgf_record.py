"""Show the game record from an SGF file.

This demonstrates the sgf module.

"""

import logging
import sys
from optparse import OptionParser

from sgfrecord import sgf
from sgfrecord import sgf_grammar
from sgfrecord import sgf_record

def show_sgf_file(pathname, lenient, show_tree):
    sgf_src = sgf.read_sgf_file(pathname)
    if show_tree:
        success, trees, errors = sgf.parse_to_tree_collection(sgf_src)
        if not success:
            raise ValueError("bad sgf file:\n%s" % errors)
        for line in sgf_grammar.describe_trees(trees):
            print(line)
        print()
    settings = sgf_record.Extraction_settings(lenient=lenient)
    success, record, unparsed, errors = sgf.parse_record(sgf_src, settings)
    if not success:
        raise ValueError("bad sgf file:\n%s" % errors)
    print(record.debug_string())
    print()
    for identifier, values in unparsed:
        print("Unparsed property: %s: %s" % (identifier, values))

_description = """\
Show the game record from an SGF file: the information the sgf_record module
extracts, followed by the properties it doesn't interpret.
"""

def main(argv):
    parser = OptionParser(usage="%prog [options] <filename>",
                          description=_description)
    parser.add_option("--lenient", action="store_true",
                      help="use defaults for bad TM and KM values")
    parser.add_option("--tree", action="store_true",
                      help="show the parsed property tree first")
    parser.add_option("-v", "--verbose", action="count", default=0,
                      help="log parser activity (repeat for more detail)")
    opts, args = parser.parse_args(argv)
    if not args:
        parser.error("not enough arguments")
    if len(args) > 1:
        parser.error("too many arguments")
    if opts.verbose > 1:
        level = logging.DEBUG
    elif opts.verbose == 1:
        level = logging.INFO
    else:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(name)s: %(message)s")
    try:
        show_sgf_file(args[0], opts.lenient, opts.tree)
    except (OSError, ValueError) as e:
        print("show_sgf_record:", str(e), file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main(sys.argv[1:])
