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
The combined result of executing several batches.
"""

from zope.interface import implementer

from .interfaces import IExecResult


@implementer(IExecResult)
class ExecutionResult(object):
    """
    An immutable total of batch results.

    Fold batch results in with `add`, which returns a new
    instance::

        result = ExecutionResult()
        for batch_result in batch_results:
            result = result.add(batch_result)
    """

    __slots__ = (
        'rows_affected',
        'last_insert_id',
        'batches_executed',
    )

    def __init__(self, rows_affected=0, last_insert_id=None, batches_executed=0):
        object.__setattr__(self, 'rows_affected', rows_affected)
        object.__setattr__(self, 'last_insert_id', last_insert_id)
        object.__setattr__(self, 'batches_executed', batches_executed)

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % (type(self).__name__,))

    def add(self, batch_result):
        """
        Return a new result that also counts *batch_result*, an
        `IExecResult`.

        Rows add up. The identifier is whatever the newest batch
        reported, even None.
        """
        rows = batch_result.rows_affected
        # DB-API cursors report -1 when the count can't be determined.
        if rows is None or rows < 0:
            rows = 0
        return ExecutionResult(
            self.rows_affected + rows,
            batch_result.last_insert_id,
            self.batches_executed + 1,
        )

    def __eq__(self, other):
        if not isinstance(other, ExecutionResult):
            return NotImplemented
        return (
            (self.rows_affected, self.last_insert_id, self.batches_executed)
            == (other.rows_affected, other.last_insert_id, other.batches_executed)
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.rows_affected, self.last_insert_id, self.batches_executed))

    def __repr__(self):
        return "<%s rows_affected=%d last_insert_id=%r batches=%d>" % (
            self.__class__.__name__,
            self.rows_affected,
            self.last_insert_id,
            self.batches_executed,
        )
