"""sgfrecord-specific test support code."""

import os
import shutil
import tempfile

from sgfrecord_tests import test_framework

# This makes TestResult ignore lines from this module in tracebacks
__unittest = True

def describe_node(node):
    """Return a node's properties as a list of pairs (identifier, values)."""
    return [(prop.identifier, prop.values) for prop in node]

def tree_shape(game_tree):
    """Summarise the structure of a Game_tree.

    Returns a pair (number of nodes in the sequence, list of child shapes).

    """
    return (len(game_tree.sequence),
            [tree_shape(child) for child in game_tree.children])


class Sandbox_testcase_mixin(object):
    """TestCase mixin adding support for filesystem sandboxes."""
    def init_sandbox_testcase_mixin(self):
        self.__sandbox = None

    def sandbox(self):
        """Get a temporary filesystem directory.

        Returns the sandbox pathname.

        When called the first time, this creates the sandbox directory; it's
        removed (with shutil.rmtree) at test-cleanup time.

        """
        if self.__sandbox is None:
            self.__sandbox = tempfile.mkdtemp(prefix='test-sandbox-')
            self.addCleanup(shutil.rmtree, self.__sandbox)
        return self.__sandbox

    def write_sandbox_file(self, filename, data):
        """Write a file in the sandbox, returning its pathname.

        data -- bytes

        """
        pathname = os.path.join(self.sandbox(), filename)
        with open(pathname, "wb") as f:
            f.write(data)
        return pathname


class Sgfrecord_testcase_mixin(object):
    """TestCase mixin adding support for sgfrecord-specific types.

     assertNodeEqual
     assertPropertyListEqual

    """
    def assertNodeEqual(self, node, expected, msg=None):
        """Check a node's properties.

        expected -- list of pairs (identifier, list of raw values)

        """
        self.assertEqual(describe_node(node), expected, msg)

    def assertPropertyListEqual(self, unparsed, expected, msg=None):
        """Check an 'unparsed' list, ignoring order."""
        self.assertItemsEqual(expected, unparsed, msg)


class Sgfrecord_SimpleTestCase(Sandbox_testcase_mixin,
                               Sgfrecord_testcase_mixin,
                               test_framework.SimpleTestCase):
    """SimpleTestCase with the sgfrecord and sandbox mixins."""
    def __init__(self, *args, **kwargs):
        test_framework.SimpleTestCase.__init__(self, *args, **kwargs)
        self.init_sandbox_testcase_mixin()

class Sgfrecord_DetachedTestCase(Sandbox_testcase_mixin,
                                 Sgfrecord_testcase_mixin,
                                 test_framework.DetachedTestCase):
    """DetachedTestCase with the sgfrecord and sandbox mixins."""
    def __init__(self, *args, **kwargs):
        test_framework.DetachedTestCase.__init__(self, *args, **kwargs)
        self.init_sandbox_testcase_mixin()


def make_simple_tests(source, prefix="test_"):
    """Make test cases from a module's test_xxx functions.

    See test_framework for details.

    The test functions can use the Sgfrecord_testcase_mixin enhancements.

    """
    return test_framework.make_simple_tests(
        source, prefix, testcase_class=Sgfrecord_SimpleTestCase)
