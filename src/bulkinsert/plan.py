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
Splitting rows into batches that fit under a bind-parameter ceiling.
"""

from zope.interface import implementer

from .interfaces import IBatchPlan


@implementer(IBatchPlan)
class BatchPlan(object):
    """
    *regular_batches* batches of *batch_size* rows, followed by one
    final batch of *leftover* rows.

    The final batch may be the only one, and it may be empty.
    """

    __slots__ = (
        'batch_size',
        'regular_batches',
        'leftover',
        'column_count',
    )

    def __init__(self, batch_size, regular_batches, leftover, column_count=1):
        self.batch_size = batch_size
        self.regular_batches = regular_batches
        self.leftover = leftover
        self.column_count = column_count

    @property
    def total_rows(self):
        return self.batch_size * self.regular_batches + self.leftover

    def __len__(self):
        return self.regular_batches + 1

    def __iter__(self):
        for _ in range(self.regular_batches):
            yield self.batch_size
        yield self.leftover

    def sizes(self):
        return list(self)

    def batches(self):
        offset = 0
        for size in self:
            yield offset, size
            offset += size

    def max_bind_vars_used(self):
        """
        The most parameters any single batch will bind.
        """
        largest = self.batch_size if self.regular_batches else self.leftover
        return max(largest, self.leftover) * self.column_count

    def __eq__(self, other):
        if not isinstance(other, BatchPlan):
            return NotImplemented
        return (
            (self.batch_size, self.regular_batches, self.leftover, self.column_count)
            == (other.batch_size, other.regular_batches, other.leftover, other.column_count)
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "<%s at %x rows=%d batches=%d size=%d leftover=%d>" % (
            self.__class__.__name__,
            id(self),
            self.total_rows,
            len(self),
            self.batch_size,
            self.leftover,
        )


def plan(row_count, column_count, max_bind_vars):
    """
    Compute the `BatchPlan` for inserting *row_count* rows of
    *column_count* values each, when no statement can bind more than
    *max_bind_vars* parameters.

    If everything fits, the plan is one batch of every row. Otherwise
    the rows are divided into one more batch than the ceiling strictly
    requires; any remainder still larger than a regular batch is peeled
    off into further regular batches until what's left is no larger
    than ``batch_size``::

        >>> plan(10, 3, 12).sizes()
        [3, 3, 3, 1]
        >>> plan(0, 1, 65535).sizes()
        [0]

    :raises ValueError: If the arguments are out of range, or if a
        single row has more columns than *max_bind_vars*.
    """
    if row_count < 0:
        raise ValueError("row_count must not be negative, not %r" % (row_count,))
    if column_count < 1:
        raise ValueError("column_count must be at least 1, not %r" % (column_count,))
    if max_bind_vars < 1:
        raise ValueError("max_bind_vars must be at least 1, not %r" % (max_bind_vars,))
    if column_count > max_bind_vars:
        raise ValueError(
            "A row of %d columns can never fit in a statement limited to %d parameters" % (
                column_count, max_bind_vars
            ))

    batches = column_count * row_count // max_bind_vars
    if not batches:
        return BatchPlan(row_count, 0, row_count, column_count)

    # Without the floor of one, a row as wide as the ceiling would
    # give a batch size of 0 and the loop below would never end.
    batch_size = max(1, row_count // (batches + 1))
    leftover = row_count - batch_size * batches
    while leftover > batch_size:
        batches += 1
        leftover -= batch_size
    return BatchPlan(batch_size, batches, leftover, column_count)
