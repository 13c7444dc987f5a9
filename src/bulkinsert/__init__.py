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
Bulk inserts that stay under a statement's bind-parameter limit.
"""

from bulkinsert.insert import Insert
from bulkinsert.insert import bulk_insert
from bulkinsert.interfaces import BatchInsertError
from bulkinsert.interfaces import BulkInsertError
from bulkinsert.interfaces import RowLengthError
from bulkinsert.options import MAX_BIND_VARS
from bulkinsert.options import Options
from bulkinsert.result import ExecutionResult
from bulkinsert.statements import CursorStatementPreparer
from bulkinsert.statements import ServerSidePreparer

__all__ = [
    'Insert',
    'bulk_insert',
    'BatchInsertError',
    'BulkInsertError',
    'RowLengthError',
    'MAX_BIND_VARS',
    'Options',
    'ExecutionResult',
    'CursorStatementPreparer',
    'ServerSidePreparer',
]
