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
"""
Prepared statements on top of DB-API connections.

DB-API has no portable notion of a prepared statement, so there are
two ways to get one:

- `CursorStatementPreparer` keeps the SQL text with a cursor and
  hands both to ``cursor.execute``. The driver must understand
  ``$1``-style placeholders.

- `ServerSidePreparer` sends ``PREPARE ... AS`` to the server and
  runs ``EXECUTE`` with the driver's own ``%s`` placeholders. This is
  the PostgreSQL syntax, and works with psycopg2 and pg8000.
"""

import logging

from zope.interface import implementer

from .interfaces import IExecResult
from .interfaces import IPreparedStatement
from .interfaces import IStatementPreparer

logger = logging.getLogger(__name__)


@implementer(IExecResult)
class ExecResult(object):
    __slots__ = ('rows_affected', 'last_insert_id')

    def __init__(self, rows_affected, last_insert_id=None):
        self.rows_affected = rows_affected
        self.last_insert_id = last_insert_id

    @classmethod
    def from_cursor(cls, cursor):
        # ``lastrowid`` is an optional DB-API extension.
        return cls(cursor.rowcount, getattr(cursor, 'lastrowid', None))

    def __repr__(self):
        return "<%s rows_affected=%r last_insert_id=%r>" % (
            type(self).__name__, self.rows_affected, self.last_insert_id
        )


class _AbstractStatement(object):

    closed = False

    def __init__(self, cursor, sql):
        self.cursor = cursor
        self.sql = sql

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._close()

    def _close(self):
        self.cursor.close()

    def __enter__(self):
        return self

    def __exit__(self, t, v, tb):
        self.close()

    def __repr__(self):
        return "<%s at 0x%x closed=%s sql=%.40r>" % (
            type(self).__name__, id(self), self.closed, self.sql
        )


@implementer(IPreparedStatement)
class CursorStatement(_AbstractStatement):
    """
    A statement that owns a cursor. Closing it closes the cursor.
    """

    def execute(self, params):
        __traceback_info__ = self.sql
        if params:
            self.cursor.execute(self.sql, params)
        else:
            self.cursor.execute(self.sql)
        return ExecResult.from_cursor(self.cursor)


@implementer(IStatementPreparer)
class CursorStatementPreparer(object):
    """
    Prepares statements by opening a new cursor on the DB-API
    *connection* for each one.
    """

    statement_factory = CursorStatement

    def __init__(self, connection):
        self.connection = connection

    def prepare(self, sql):
        cursor = self.connection.cursor()
        return self.statement_factory(cursor, sql)


@implementer(IPreparedStatement)
class ServerSideStatement(_AbstractStatement):
    """
    A statement prepared by the server under *name*.

    Closing it sends ``DEALLOCATE`` and then closes the cursor.
    """

    #: The placeholder the driver uses for its own parameters.
    driver_placeholder = '%s'

    def __init__(self, cursor, sql, name):
        super(ServerSideStatement, self).__init__(cursor, sql)
        self.name = name

    def execute(self, params):
        if params:
            stmt = 'EXECUTE %s(%s)' % (
                self.name,
                ','.join([self.driver_placeholder] * len(params))
            )
            __traceback_info__ = stmt, self.sql
            self.cursor.execute(stmt, params)
        else:
            # Neither MySQL nor PostgreSQL like a set of empty parens: ()
            stmt = 'EXECUTE %s' % (self.name,)
            __traceback_info__ = stmt, self.sql
            self.cursor.execute(stmt)
        # There's no lastrowid for an EXECUTE; use RETURNING in the
        # template and fetch it if it's needed.
        return ExecResult(self.cursor.rowcount)

    def _close(self):
        try:
            self.cursor.execute('DEALLOCATE %s' % (self.name,))
        finally:
            self.cursor.close()


@implementer(IStatementPreparer)
class ServerSidePreparer(object):
    """
    Prepares statements on the server with ``PREPARE name AS sql``.
    """

    statement_factory = ServerSideStatement

    _prepared_stmt_counter = 0

    def __init__(self, connection, name_prefix='bulkinsert'):
        self.connection = connection
        self.name_prefix = name_prefix

    def _next_prepared_stmt_name(self, sql):
        # Statement names are per-session. The hash distinguishes two
        # threads that happen to read the same counter value.
        ServerSidePreparer._prepared_stmt_counter += 1
        return '%s_prep_stmt_%d_%d' % (
            self.name_prefix,
            ServerSidePreparer._prepared_stmt_counter,
            abs(hash(sql)),
        )

    def prepare(self, sql):
        name = self._next_prepared_stmt_name(sql)
        stmt = 'PREPARE %s AS %s' % (name, sql.strip())
        cursor = self.connection.cursor()
        try:
            __traceback_info__ = stmt
            # No params, so the driver leaves any ``%`` in the text alone.
            cursor.execute(stmt)
        except Exception:
            cursor.close()
            raise
        logger.debug("Prepared statement %s", name)
        return self.statement_factory(cursor, sql, name)
