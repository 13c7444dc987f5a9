"""bulkinsert.tests package"""

import unittest
from unittest import mock as _mock

from zope.interface import implementer

from bulkinsert.interfaces import IPreparedStatement
from bulkinsert.interfaces import IStatementPreparer
from bulkinsert.statements import ExecResult

mock = _mock


class TestCase(unittest.TestCase):
    """
    Base for the tests in this package.
    """

    maxDiff = None

    def assertIsEmpty(self, container, msg=None):
        self.assertLength(container, 0, msg)

    assertEmpty = assertIsEmpty

    def assertLength(self, container, length, msg=None):
        self.assertEqual(len(container), length,
                         '%s -- %s' % (msg, container) if msg else container)


class MockCursor(object):
    closed = False
    rowcount = -1
    lastrowid = None

    def __init__(self, conn=None):
        self.executed = []
        self.connection = conn
        # Exceptions to raise from execute, keyed by the
        # 1-based number of the call.
        self.fail_on = {}

    def execute(self, stmt, params=None):
        params = tuple(params) if isinstance(params, list) else params
        self.executed.append((stmt, params))
        exc = self.fail_on.get(len(self.executed))
        if exc is not None:
            raise exc
        self.rowcount = len(params) if params else 0

    def close(self):
        self.closed = True


class MockConnection(object):

    def __init__(self):
        self.cursors = []

    def cursor(self):
        cursor = MockCursor(self)
        self.cursors.append(cursor)
        return cursor


@implementer(IPreparedStatement)
class MockStatement(object):
    closed = False

    def __init__(self, preparer, sql):
        self.preparer = preparer
        self.sql = sql

    def execute(self, params):
        preparer = self.preparer
        preparer.executed.append((self.sql, list(params)))
        preparer.events.append('execute')
        exc = preparer.execute_failures.get(len(preparer.executed))
        if exc is not None:
            raise exc
        return preparer.result_for(self.sql, params)

    def close(self):
        self.closed = True
        self.preparer.events.append('close')
        if self.preparer.close_failure is not None:
            raise self.preparer.close_failure


@implementer(IStatementPreparer)
class MockPreparer(object):
    """
    Records everything that's prepared and executed.

    By default each execution reports one affected row per row
    in the batch (params divided by *column_count*), and the
    execution number as the generated identifier.
    """

    close_failure = None

    def __init__(self, column_count=1):
        self.column_count = column_count
        self.prepared = []
        self.executed = []
        self.events = []
        self.statements = []
        # {1-based call number: exception}
        self.prepare_failures = {}
        self.execute_failures = {}

    def prepare(self, sql):
        self.prepared.append(sql)
        self.events.append('prepare')
        exc = self.prepare_failures.get(len(self.prepared))
        if exc is not None:
            raise exc
        stmt = MockStatement(self, sql)
        self.statements.append(stmt)
        return stmt

    def result_for(self, sql, params):
        return ExecResult(len(params) // self.column_count, len(self.executed))
