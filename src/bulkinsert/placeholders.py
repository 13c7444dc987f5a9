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
Building the ``VALUES`` expression for one batch.

For two rows and the casts ``('', 'int')`` this produces::

    ($1, $2::int),
    ($3, $4::int)
"""

#: The text in a SQL template that gets replaced by the values.
VALUES_MARKER = '<values>'

def placeholder(number, cast=None):
    """
    Return the positional placeholder for the 1-based parameter *number*,
    with a ``::cast`` suffix if *cast* is not empty.
    """
    if cast:
        return '$%d::%s' % (number, cast)
    return '$%d' % (number,)


def row_placeholders(row_index, casts):
    """
    Return the parenthesized placeholder group for the 0-based *row_index*.
    """
    column_count = len(casts)
    first = row_index * column_count + 1
    return '(%s)' % ', '.join(
        placeholder(first + j, cast)
        for j, cast in enumerate(casts)
    )


def build(row_count, casts):
    """
    Return the value-list expression for a batch of *row_count* rows.

    Parameters are numbered from 1, row-major: row *i*, column *j*
    uses ``$(i * len(casts) + j + 1)``. Groups are separated by a
    comma and a newline. Zero rows produce an empty string.
    """
    casts = tuple(casts)
    return ',\n'.join(
        row_placeholders(i, casts)
        for i in range(row_count)
    )


def substitute(sql, values):
    """
    Replace the first `VALUES_MARKER` in *sql* with *values*.
    """
    return sql.replace(VALUES_MARKER, values, 1)

