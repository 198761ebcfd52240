"""Run the test_xxx(tc) functions under pytest.

Each test function gets a fresh TestCase as its 'tc' parameter.

"""

import pytest

from sgfrecord_tests import sgfrecord_test_support

@pytest.fixture
def tc():
    testcase = sgfrecord_test_support.Sgfrecord_DetachedTestCase()
    yield testcase
    testcase.doCleanups()
