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
Interfaces and exceptions for bulk inserts.

The database itself is an external collaborator. All that's needed
from it is an `IStatementPreparer`.
"""

from zope.interface import Attribute
from zope.interface import Interface

# pylint:disable=inherit-non-class,no-method-argument,no-self-argument

###
# The database collaborator.
###

class IExecResult(Interface):
    """
    What one statement execution reports.
    """

    rows_affected = Attribute("The number of rows the statement changed (an int).")

    last_insert_id = Attribute(
        "The identifier generated by the statement, or None if the "
        "driver doesn't report one. What 'last' means for a multi-row "
        "insert is up to the driver."
    )


class IPreparedStatement(Interface):
    """
    A statement prepared from a parameterized SQL string.

    Prepared statements are used for exactly one batch and then
    closed.
    """

    sql = Attribute("The SQL text this statement was prepared from.")

    def execute(params):
        """
        Execute the statement with the flat positional *params* (a list).

        Returns an `IExecResult`. Driver exceptions propagate unchanged.
        """

    def close():
        """
        Release the statement. Safe to call more than once.
        """


class IStatementPreparer(Interface):
    """
    Something that can prepare parameterized statements,
    typically wrapping a DB-API connection.
    """

    def prepare(sql):
        """
        Return a new `IPreparedStatement` for the string *sql*.

        Driver exceptions propagate unchanged.
        """

###
# Our own components.
###

class IBatchPlan(Interface):
    """
    How a set of rows is split into batches.

    Iterating produces the batch sizes in order; their sum is always
    `total_rows`. All batches but the last have the same size,
    `batch_size`, and the last is never larger than that.
    """

    total_rows = Attribute("The number of rows planned for.")
    batch_size = Attribute("The size of each regular batch.")
    regular_batches = Attribute("The number of batches of exactly `batch_size` rows.")
    leftover = Attribute("The number of rows in the final batch.")

    def batches():
        """
        Iterate ``(offset, length)`` pairs, one per batch, covering
        the rows contiguously and in order.
        """

    def __len__():
        """The total number of batches, including the final one."""

    def __iter__():
        """Iterate the batch sizes."""


class IInsert(Interface):
    """
    A bulk INSERT statement.
    """

    sql = Attribute("The SQL template, containing ``<values>`` exactly once.")
    casts = Attribute("A tuple with one cast annotation (or '') per column.")
    column_count = Attribute("The number of columns; ``len(casts)``.")

    def plan(row_count):
        """
        Return the `IBatchPlan` that would be used for *row_count* rows.
        """

    def execute(rows):
        """
        Insert *rows*, a sequence of sequences, in as many batches as
        needed to stay under the bind-parameter ceiling.

        Returns a :class:`bulkinsert.result.ExecutionResult` describing
        all the batches.

        :raises RowLengthError: Before anything is executed, if some
            row doesn't have exactly `column_count` values.
        :raises BatchInsertError: If preparing or executing a batch
            fails. No further batches are attempted. The driver's own
            exception is not raised directly; it is wrapped, unchanged,
            as the ``error`` attribute (and ``__cause__``) of this
            exception, whose ``result`` holds the rows inserted by the
            earlier batches. Callers that used to catch driver
            exceptions should catch this instead. A failure to close a
            statement is logged and never raised.
        """

###
# Exceptions.
###

class BulkInsertError(Exception):
    """
    Base class for errors raised by this package.
    """


class RowLengthError(BulkInsertError, ValueError):
    """
    Raised when a row doesn't have one value per column.
    """

    def __init__(self, row_number, expected, actual):
        super(RowLengthError, self).__init__(row_number, expected, actual)
        self.row_number = row_number
        self.expected = expected
        self.actual = actual

    def __str__(self):
        return 'Row %d has %d values; expected %d.' % (
            self.row_number, self.actual, self.expected
        )


class BatchInsertError(BulkInsertError):
    """
    Raised when preparing or executing a batch fails.

    The exception raised by the database is available unchanged as
    `error`, and is also the ``__cause__``.
    """

    #: The :class:`~bulkinsert.result.ExecutionResult` aggregated from the
    #: batches that succeeded before this one.
    result = None

    #: The 1-based number of the batch that failed.
    batch_number = None

    #: The exception raised by the database.
    error = None

    def __init__(self, error, result, batch_number):
        super(BatchInsertError, self).__init__(error, result, batch_number)
        self.error = error
        self.result = result
        self.batch_number = batch_number

    def __str__(self):
        return '%s: Batch %d failed after %d rows were inserted: %r' % (
            type(self).__name__,
            self.batch_number,
            self.result.rows_affected,
            self.error,
        )

    __repr__ = __str__
