##############################################################################
#
# Copyright (c) 2024 Zope Foundation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################

from zope.interface.verify import verifyObject

from bulkinsert.tests import TestCase
from bulkinsert.tests import MockConnection


class TestExecResult(TestCase):

    def test_from_cursor(self):
        from bulkinsert.statements import ExecResult
        from bulkinsert.interfaces import IExecResult

        class Cursor(object):
            rowcount = 3
            lastrowid = 9

        result = ExecResult.from_cursor(Cursor())
        verifyObject(IExecResult, result)
        self.assertEqual(result.rows_affected, 3)
        self.assertEqual(result.last_insert_id, 9)

    def test_from_cursor_without_lastrowid(self):
        from bulkinsert.statements import ExecResult

        class Cursor(object):
            rowcount = 3

        self.assertIsNone(ExecResult.from_cursor(Cursor()).last_insert_id)


class TestCursorStatementPreparer(TestCase):

    def _makeOne(self, conn):
        from bulkinsert.statements import CursorStatementPreparer
        return CursorStatementPreparer(conn)

    def test_provides(self):
        from bulkinsert.interfaces import IStatementPreparer
        from bulkinsert.interfaces import IPreparedStatement
        preparer = self._makeOne(MockConnection())
        verifyObject(IStatementPreparer, preparer)
        verifyObject(IPreparedStatement, preparer.prepare('SELECT 1'))

    def test_prepare_execute_close(self):
        conn = MockConnection()
        stmt = self._makeOne(conn).prepare('INSERT INTO t VALUES ($1, $2)')
        self.assertLength(conn.cursors, 1)
        cursor = conn.cursors[0]

        result = stmt.execute([1, 'a'])
        self.assertEqual(cursor.executed, [('INSERT INTO t VALUES ($1, $2)', (1, 'a'))])
        self.assertEqual(result.rows_affected, 2)

        stmt.close()
        self.assertTrue(cursor.closed)
        self.assertTrue(stmt.closed)
        # Idempotent
        stmt.close()

    def test_execute_without_params(self):
        conn = MockConnection()
        stmt = self._makeOne(conn).prepare('INSERT INTO t VALUES ')
        result = stmt.execute([])
        self.assertEqual(conn.cursors[0].executed, [('INSERT INTO t VALUES ', None)])
        self.assertEqual(result.rows_affected, 0)

    def test_context_manager(self):
        conn = MockConnection()
        with self._makeOne(conn).prepare('SELECT 1') as stmt:
            self.assertFalse(stmt.closed)
        self.assertTrue(conn.cursors[0].closed)
        self.assertIn('SELECT 1', repr(stmt))

    def test_driver_errors_propagate(self):
        conn = MockConnection()
        stmt = self._makeOne(conn).prepare('INSERT')
        error = ValueError('driver')
        conn.cursors[0].fail_on[1] = error
        with self.assertRaises(ValueError) as exc:
            stmt.execute([1])
        self.assertIs(exc.exception, error)


class TestServerSidePreparer(TestCase):

    def _makeOne(self, conn, **kwargs):
        from bulkinsert.statements import ServerSidePreparer
        return ServerSidePreparer(conn, **kwargs)

    def test_provides(self):
        from bulkinsert.interfaces import IStatementPreparer
        from bulkinsert.interfaces import IPreparedStatement
        preparer = self._makeOne(MockConnection())
        verifyObject(IStatementPreparer, preparer)
        verifyObject(IPreparedStatement, preparer.prepare('SELECT 1'))

    def test_prepare_execute_deallocate(self):
        conn = MockConnection()
        stmt = self._makeOne(conn, name_prefix='t').prepare(
            '  INSERT INTO t VALUES ($1, $2::int)\n')
        name = stmt.name
        self.assertTrue(name.startswith('t_prep_stmt_'), name)
        cursor = conn.cursors[0]
        self.assertEqual(cursor.executed, [
            ('PREPARE %s AS INSERT INTO t VALUES ($1, $2::int)' % name, None),
        ])

        result = stmt.execute(['a', 1])
        self.assertEqual(cursor.executed[-1], ('EXECUTE %s(%%s,%%s)' % name, ('a', 1)))
        self.assertEqual(result.rows_affected, 2)
        self.assertIsNone(result.last_insert_id)

        stmt.close()
        self.assertEqual(cursor.executed[-1], ('DEALLOCATE %s' % name, None))
        self.assertTrue(cursor.closed)

    def test_execute_without_params(self):
        conn = MockConnection()
        stmt = self._makeOne(conn).prepare('INSERT')
        stmt.execute([])
        self.assertEqual(conn.cursors[0].executed[-1], ('EXECUTE %s' % stmt.name, None))

    def test_names_are_unique(self):
        preparer = self._makeOne(MockConnection())
        self.assertNotEqual(preparer.prepare('SELECT 1').name,
                            preparer.prepare('SELECT 1').name)

    def test_prepare_failure_closes_cursor(self):
        class FailingConnection(MockConnection):
            def cursor(self):
                cursor = super(FailingConnection, self).cursor()
                cursor.fail_on[1] = RuntimeError('syntax')
                return cursor

        conn = FailingConnection()
        with self.assertRaises(RuntimeError):
            self._makeOne(conn).prepare('INSERT garbage')
        self.assertTrue(conn.cursors[0].closed)

    def test_deallocate_failure_still_closes_cursor(self):
        conn = MockConnection()
        stmt = self._makeOne(conn).prepare('SELECT 1')
        conn.cursors[0].fail_on[2] = RuntimeError('gone')
        with self.assertRaises(RuntimeError):
            stmt.close()
        self.assertTrue(conn.cursors[0].closed)

    def test_with_insert(self):
        from bulkinsert.insert import Insert
        conn = MockConnection()
        insert = Insert(self._makeOne(conn),
                        'INSERT INTO t (a, b) VALUES <values>', ('', 'int'),
                        max_bind_vars=4)
        result = insert.execute([(1, 2), (3, 4), (5, 6)])
        # Plan is [1, 1, 1].
        self.assertEqual(result.batches_executed, 3)
        # Each batch used its own cursor, and released it.
        self.assertLength(conn.cursors, 3)
        self.assertTrue(all(c.closed for c in conn.cursors))
        first = conn.cursors[0].executed
        self.assertIn('AS INSERT INTO t (a, b) VALUES ($1, $2::int)', first[0][0])
        self.assertEqual(first[1][1], (1, 2))
        self.assertTrue(first[2][0].startswith('DEALLOCATE'))
