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
The bind-parameter ceiling and the options accepted by `Insert`.
"""

from bulkinsert._util import get_positive_integer_from_environ

#: The most positional parameters a single statement may carry.
#: This is the limit of the PostgreSQL wire protocol, which counts
#: parameters with a 16-bit integer. Override it with the
#: ``BULKINSERT_MAX_BIND_VARS`` environment variable, or per
#: `Insert` with the ``max_bind_vars`` option.
MAX_BIND_VARS = get_positive_integer_from_environ(
    'BULKINSERT_MAX_BIND_VARS',
    65535
)

class Options(object):
    """Options for tuning a bulk :class:`~bulkinsert.insert.Insert`.

    These can be provided as keyword options to the ``Insert``
    constructor::

        insert = Insert(db, sql, casts, max_bind_vars=999)

    Alternatively the constructor accepts an ``options`` parameter,
    which should be an Options instance.
    """

    #: The bind-parameter ceiling. ``None`` means
    #: the value of `MAX_BIND_VARS` at the time of use.
    max_bind_vars = None

    #: Don't prepare or execute batches that hold no rows.
    #: Such a batch would render ``VALUES`` with nothing after it.
    skip_empty_batches = True

    def __init__(self, **kwoptions):
        for key, value in kwoptions.items():
            if key not in self.valid_option_names():
                raise TypeError("Unknown parameter: %s (Known: %s)" % (
                    key,
                    self.valid_option_names()
                ))
            setattr(self, key, value)

        if self.max_bind_vars is not None and self.max_bind_vars < 1:
            raise ValueError("max_bind_vars must be at least 1, not %r" % (
                self.max_bind_vars,
            ))

    @property
    def bind_limit(self):
        if self.max_bind_vars is None:
            return MAX_BIND_VARS
        return self.max_bind_vars

    @classmethod
    def valid_option_names(cls):
        return sorted(
            x
            for x in vars(cls)
            if not callable(getattr(cls, x))
            and not isinstance(vars(cls)[x], property)
            and not x.startswith('_')
        )

    def __repr__(self):
        return "<%s %s>" % (
            type(self).__name__,
            ' '.join('%s=%r' % (k, getattr(self, k)) for k in self.valid_option_names())
        )
