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
Bulk INSERT statements, executed in batches.
"""

import itertools
import logging
from collections.abc import Sequence
from contextlib import contextmanager

from zope.interface import implementer

from ._util import log_timed
from ._util import metricmethod
from .interfaces import BatchInsertError
from .interfaces import IInsert
from .interfaces import RowLengthError
from .options import Options
from .placeholders import VALUES_MARKER
from .placeholders import build
from .placeholders import substitute
from .plan import plan
from .result import ExecutionResult

logger = logging.getLogger(__name__)

__all__ = [
    'Insert',
    'bulk_insert',
    'flatten_rows',
]


def flatten_rows(rows, offset=0, length=None):
    """
    Return the values of ``rows[offset:offset + length]`` as one
    list, row-major: all of the first row's values, then all of
    the second row's, and so on.
    """
    if length is None:
        length = len(rows) - offset
    return list(itertools.chain.from_iterable(rows[offset:offset + length]))


@contextmanager
def prepared_statement(db, sql):
    """
    Prepare *sql* with *db* and close the statement on the way out.

    A failure to close is only logged. If the body raised, that
    exception propagates; otherwise the body's work has already
    happened and must still be counted.
    """
    stmt = db.prepare(sql)
    try:
        yield stmt
    finally:
        try:
            stmt.close()
        except Exception: # pylint:disable=broad-except
            logger.exception("Failed to close %r", stmt)


@implementer(IInsert)
class Insert(object):
    """
    A bulk insert statement.

    It is made from an `~.IStatementPreparer` *db*, a SQL template *sql*,
    and one cast annotation per column being inserted, *casts*. Any
    cast may be empty (``''`` or None), but there must be exactly one
    per column. The text ``<values>`` in *sql* is replaced with the
    placeholders for each batch::

        insert = Insert(db,
                        'INSERT INTO t (id, n, name) VALUES <values>',
                        ('', 'int', 'text'))
        result = insert.execute(rows)

    Options may be given as keywords or as an `~.Options` instance.
    """

    def __init__(self, db, sql, casts, options=None, **kwoptions):
        if options and kwoptions:
            raise TypeError("The Insert constructor accepts either "
                            "an options parameter or keyword arguments, not both")
        if options is None:
            options = Options(**kwoptions)

        marker_count = sql.count(VALUES_MARKER)
        if marker_count != 1:
            raise ValueError("The SQL must contain %r exactly once, not %d times" % (
                VALUES_MARKER, marker_count
            ))

        casts = tuple(cast or '' for cast in casts)
        if not casts:
            raise ValueError("At least one column is required")

        self.db = db
        self.sql = sql
        self.casts = casts
        self.options = options

    def __repr__(self):
        return "<%s at %x columns=%d sql=%.40r>" % (
            self.__class__.__name__,
            id(self),
            self.column_count,
            self.sql,
        )

    @property
    def column_count(self):
        return len(self.casts)

    @property
    def max_bind_vars(self):
        return self.options.bind_limit

    def plan(self, row_count):
        return plan(row_count, self.column_count, self.max_bind_vars)

    def statement_for(self, row_count):
        """
        Return the SQL for a batch of *row_count* rows.
        """
        return substitute(self.sql, build(row_count, self.casts))

    def _check_rows(self, rows):
        column_count = self.column_count
        for row_number, row in enumerate(rows):
            if len(row) != column_count:
                raise RowLengthError(row_number, column_count, len(row))

    def _execute_batch(self, sql, params):
        with prepared_statement(self.db, sql) as stmt:
            return stmt.execute(params)

    @metricmethod
    @log_timed
    def execute(self, rows):
        if not isinstance(rows, Sequence):
            rows = list(rows)
        self._check_rows(rows)

        batch_plan = self.plan(len(rows))
        logger.debug(
            "Inserting %d rows of %d columns in %d batches (batch size %d, leftover %d)",
            len(rows), self.column_count, len(batch_plan),
            batch_plan.batch_size, batch_plan.leftover
        )

        skip_empty = self.options.skip_empty_batches
        result = ExecutionResult()
        # Every regular batch shares the same text.
        regular_sql = None
        for batch_number, (offset, length) in enumerate(batch_plan.batches(), 1):
            if not length and skip_empty:
                logger.debug("Skipping empty batch %d", batch_number)
                continue

            if batch_number <= batch_plan.regular_batches:
                if regular_sql is None:
                    regular_sql = self.statement_for(length)
                sql = regular_sql
            else:
                sql = self.statement_for(length)

            params = flatten_rows(rows, offset, length)
            logger.debug("Executing batch %d of %d: %d rows, %d params",
                         batch_number, len(batch_plan), length, len(params))
            try:
                batch_result = self._execute_batch(sql, params)
            except Exception as ex:
                logger.debug("Batch %d failed after %d rows were inserted: %r",
                             batch_number, result.rows_affected, ex)
                raise BatchInsertError(ex, result, batch_number) from ex
            result = result.add(batch_result)

        return result


def bulk_insert(db, sql, casts, rows, **kwoptions):
    """
    Construct an `Insert` and execute it for *rows*.
    """
    return Insert(db, sql, casts, **kwoptions).execute(rows)
