"""Tests for sgf.py."""

import os

from sgfrecord_tests import sgfrecord_test_support

from sgfrecord import sgf
from sgfrecord.sgf_record import Extraction_settings, Game_record, Move

def make_tests(suite):
    suite.addTests(sgfrecord_test_support.make_simple_tests(globals()))


SAMPLE_SGF = """\
(;FF[4]GM[1]SZ[19]KM[6.5]RU[Chinese]
PB[Black Player]BR[2d]PW[White Player]WR[3d]DT[2021-03-04]RE[W+R]
AB[dd][pp]AW[dp]
;W[pd];B[qf]C[comment with \\] bracket];W[];B[tt])
"""

def test_parse_to_tree_collection(tc):
    success, trees, errors = sgf.parse_to_tree_collection(SAMPLE_SGF)
    tc.assertIs(success, True)
    tc.assertEqual(errors, "")
    tc.assertEqual(len(trees), 1)
    tc.assertEqual(len(trees[0].sequence), 5)
    tc.assertNodeEqual(trees[0].sequence[2], [
        ("B", ["qf"]),
        ("C", ["comment with \\] bracket"]),
        ])

def test_parse_to_tree_collection_failure(tc):
    success, trees, errors = sgf.parse_to_tree_collection("\n\n;")
    tc.assertIs(success, False)
    tc.assertEqual(trees, [])
    tc.assertIn("failed in finding a tree start", errors)

    success, trees, errors = sgf.parse_to_tree_collection("(a;)")
    tc.assertIs(success, False)
    tc.assertIn("failed in finding a node start", errors)

def test_parse_to_tree_collection_error_list(tc):
    success, trees, errors = sgf.parse_to_tree_collection("(;B[aa];W[bb]x)")
    tc.assertIs(success, False)
    tc.assertEqual(errors.split("\n"), [
        "non-empty contents after the end of a value (at position 13)",
        "error in parsing a node (node starts at position 7)",
        ])

def test_parse_record(tc):
    success, record, unparsed, errors = sgf.parse_record(SAMPLE_SGF)
    tc.assertIs(success, True)
    tc.assertEqual(errors, "")
    tc.assertIsInstance(record, Game_record)
    tc.assertEqual((record.board_width, record.board_height), (19, 19))
    tc.assertEqual(record.komi, 6.5)
    tc.assertEqual(record.rule, "Chinese")
    tc.assertEqual(record.black_name, "Black Player")
    tc.assertEqual(record.black_rank, "2d")
    tc.assertEqual(record.white_name, "White Player")
    tc.assertEqual(record.white_rank, "3d")
    tc.assertEqual(record.date, "2021-03-04")
    tc.assertEqual(record.result, -1.2)
    tc.assertIs(record.resigned, True)
    tc.assertEqual(record.black_stones, [(3, 3), (15, 15)])
    tc.assertEqual(record.white_stones, [(3, 15)])
    tc.assertEqual(record.moves, [
        Move('w', (15, 3)),
        Move('b', (16, 5)),
        Move('w', None),
        Move('b', (19, 19)),
        ])
    tc.assertPropertyListEqual(unparsed, [
        ("FF", "4"),
        ("GM", "1"),
        ("C", "comment with \\] bracket"),
        ])

def test_parse_record_failure(tc):
    def check(s, expected_message):
        success, record, unparsed, errors = sgf.parse_record(s)
        tc.assertIs(success, False)
        tc.assertIsNone(record)
        tc.assertEqual(unparsed, [])
        tc.assertIn(expected_message, errors)
    check("", "failed in finding a tree start")
    check("(;SZ[19]", "missing the end of a node")
    check("(;SZ[9])(;SZ[9])", "multiple trees unsupported")
    check("(;RE[X+5])", "unknown color")
    check("(;RE[B+?])", "failed in parsing score")
    check("(;RE[B])", "value too short")
    check("(;SZ[9];B[abc])", "bad coordinate")
    check("(;SZ[9]GN[x];W[a])", "bad coordinate")
    check("(;KM[six])", "bad komi (KM) value")
    check("(;TM[])", "bad TM value")

def test_parse_record_settings(tc):
    s = "(;KM[six]TM[];B[aa])"
    success, record, unparsed, errors = sgf.parse_record(
        s, Extraction_settings(lenient=True))
    tc.assertIs(success, True)
    tc.assertEqual(record.komi, 6.5)
    tc.assertEqual(record.timelimit, 0)
    tc.assertEqual(record.moves, [Move('b', (0, 0))])
    success, record, unparsed, errors = sgf.parse_record(s)
    tc.assertIs(success, False)

def test_parse_record_is_repeatable(tc):
    _, record1, unparsed1, _ = sgf.parse_record(SAMPLE_SGF)
    _, record2, unparsed2, _ = sgf.parse_record(SAMPLE_SGF)
    tc.assertIsNot(record1, record2)
    tc.assertEqual(record1.debug_string(), record2.debug_string())
    tc.assertEqual(unparsed1, unparsed2)

def test_parse_record_and_check(tc):
    success, record, unparsed, errors = sgf.parse_record_and_check(
        SAMPLE_SGF, expected_board_size=19, check_has_result=True)
    tc.assertIs(success, True)
    tc.assertEqual(errors, "")
    tc.assertEqual(len(record.moves), 4)
    tc.assertEqual(len(unparsed), 3)

    success, record, unparsed, errors = sgf.parse_record_and_check(
        SAMPLE_SGF, expected_board_size=9)
    tc.assertIs(success, False)
    tc.assertIsNone(record)
    tc.assertEqual(errors, "unexpected board size: 19x19 (expected 9)")

    success, record, unparsed, errors = sgf.parse_record_and_check(
        "(;SZ[9];B[aa])", expected_board_size=9, check_has_result=True)
    tc.assertIs(success, False)
    tc.assertEqual(errors, "the game has an unknown result")

    success, record, unparsed, errors = sgf.parse_record_and_check(
        "(;SZ[9];B[aa])")
    tc.assertIs(success, True)

    success, record, unparsed, errors = sgf.parse_record_and_check(
        "(;SZ[9];B[a])", expected_board_size=9)
    tc.assertIs(success, False)
    tc.assertIn("bad coordinate", errors)

def test_parse_record_and_check_logging(tc):
    with tc.assertLogs("sgfrecord.sgf", "WARNING") as cm:
        sgf.parse_record_and_check("(;SZ[9];B[aa])", expected_board_size=19)
        sgf.parse_record_and_check("(;SZ[9];B[aa])", check_has_result=True)
    tc.assertEqual(cm.output, [
        "WARNING:sgfrecord.sgf:SGF parser error: "
        "unexpected board size: 9x9 (expected 19)",
        "WARNING:sgfrecord.sgf:SGF parser error: "
        "the game has an unknown result",
        ])


def test_decode_sgf_data_line_endings(tc):
    ds = sgf.decode_sgf_data
    tc.assertEqual(ds(b"(;C[a\r\nb\rc\n\rd\ne])", "ascii"),
                   "(;C[a\nb\nc\nd\ne])")

def test_decode_sgf_data_charset(tc):
    ds = sgf.decode_sgf_data
    tc.assertEqual(ds("(;CA[UTF-8]PB[Ōsaka])".encode("utf-8")),
                   "(;CA[UTF-8]PB[Ōsaka])")
    tc.assertEqual(ds("(;CA[ISO-8859-1]PB[caf\xe9])".encode("latin-1")),
                   "(;CA[ISO-8859-1]PB[caf\xe9])")
    # explicit encoding wins
    tc.assertEqual(ds("(;CA[UTF-8]PB[caf\xe9])".encode("latin-1"),
                      "latin-1"),
                   "(;CA[UTF-8]PB[caf\xe9])")
    tc.assertEqual(ds(b"(;B[aa])"), "(;B[aa])")
    tc.assertEqual(ds(b""), "")

def test_decode_sgf_data_bad_charset(tc):
    with tc.assertLogs("sgfrecord.sgf", "WARNING") as cm:
        s = sgf.decode_sgf_data("(;CA[nonsense]C[\xe9])".encode("utf-8"))
    tc.assertEqual(s, "(;CA[nonsense]C[\xe9])")
    tc.assertEqual(cm.output, [
        "WARNING:sgfrecord.sgf:unknown encoding 'nonsense'; using UTF-8"])

    # codecs which can't be used for decoding with "replace"
    with tc.assertLogs("sgfrecord.sgf", "WARNING") as cm:
        s = sgf.decode_sgf_data(b"(;CA[idna]C[\xe9])")
    tc.assertEqual(s, "(;CA[idna]C[\ufffd])")
    tc.assertEqual(cm.output, [
        "WARNING:sgfrecord.sgf:unknown encoding 'idna'; using UTF-8"])

    with tc.assertLogs("sgfrecord.sgf", "WARNING") as cm:
        s = sgf.decode_sgf_data(b"(;CA[utf\x008]C[x])")
    tc.assertEqual(s, "(;CA[utf\x008]C[x])")
    tc.assertEqual(cm.output, [
        "WARNING:sgfrecord.sgf:unknown encoding 'utf\x008'; using UTF-8"])

def test_read_sgf_file_bad_charset(tc):
    pathname = tc.write_sandbox_file("game.sgf", b"(;CA[idna]B[aa])")
    with tc.assertLogs("sgfrecord.sgf", "WARNING"):
        tc.assertEqual(sgf.read_sgf_file(pathname), "(;CA[idna]B[aa])")

def test_decode_sgf_data_undecodable(tc):
    s = sgf.decode_sgf_data(b"(;CA[UTF-8]C[\xff])")
    tc.assertEqual(s, "(;CA[UTF-8]C[\ufffd])")

def test_read_sgf_file(tc):
    pathname = tc.write_sandbox_file(
        "game.sgf", SAMPLE_SGF.replace("\n", "\r\n").encode("ascii"))
    s = sgf.read_sgf_file(pathname)
    tc.assertEqual(s, SAMPLE_SGF)
    success, record, unparsed, errors = sgf.parse_record(s)
    tc.assertIs(success, True)
    tc.assertEqual(len(record.moves), 4)

def test_read_sgf_file_encoding(tc):
    pathname = tc.write_sandbox_file(
        "game.sgf", "(;PB[caf\xe9])".encode("cp1252"))
    tc.assertEqual(sgf.read_sgf_file(pathname, encoding="cp1252"),
                   "(;PB[caf\xe9])")

def test_read_sgf_file_missing(tc):
    pathname = os.path.join(tc.sandbox(), "nonexistent.sgf")
    tc.assertRaises(OSError, sgf.read_sgf_file, pathname)
