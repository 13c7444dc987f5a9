# -*- coding: utf-8 -*-
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
Environment-driven settings, timing logs and metrics shared by
the package.
"""

import logging
import os
import sys
from functools import wraps
from logging import DEBUG
from logging import INFO
from logging import WARN
from logging import ERROR
from time import perf_counter

from ZConfig.datatypes import asBoolean
from ZConfig.datatypes import integer
from ZConfig.datatypes import RangeCheckedConversion
from ZConfig.datatypes import stock_datatypes

from perfmetrics import metricmethod

_logger = logging.getLogger('bulkinsert')
perf_logger = _logger.getChild('timing')

#: Beneath DEBUG; extremely verbose.
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

__all__ = [
    'TRACE',
    'get_duration_from_environ',
    'get_positive_integer_from_environ',
    'get_boolean_from_environ',
    'log_timed',
    'metricmethod',
    'parse_boolean',
    'positive_integer',
]

IN_TESTRUNNER = (
    # zope-testrunner --test-path ...
    'zope-testrunner' in sys.argv[0]
    # python -m zope.testrunner --test-path ...
    or os.path.join('zope', 'testrunner') in sys.argv[0]
)

positive_integer = RangeCheckedConversion(integer, min=1)

def _setting_from_environ(converter, environ_name, default, logger):
    result = default
    env_val = os.environ.get(environ_name, default)
    if env_val is not default:
        try:
            result = converter(env_val)
        except (ValueError, TypeError):
            logger.exception("Failed to parse environment value %r for key %r",
                             env_val, environ_name)
            result = default

    logger.debug('Using value %s from environ %r=%r (default=%r)',
                 result, environ_name, env_val, default)
    return result


def get_positive_integer_from_environ(environ_name, default, logger=_logger):
    return _setting_from_environ(positive_integer, environ_name, default, logger)

def parse_boolean(val):
    if val == '0':
        return False
    if val == '1':
        return True
    return asBoolean(val)

def get_boolean_from_environ(environ_name, default, logger=_logger):
    return _setting_from_environ(parse_boolean, environ_name, default, logger)

def get_duration_from_environ(environ_name, default, logger=_logger):
    """
    Return a floating-point number of seconds from the environment *environ_name*,
    or *default*.

    Examples: ``1.24s``, ``3m``, ``1m 3.6s``::

        >>> import os
        >>> os.environ['BULKINSERT_TEST_VAL'] = '2.3'
        >>> get_duration_from_environ('BULKINSERT_TEST_VAL', None)
        2.3
        >>> os.environ['BULKINSERT_TEST_VAL'] = '1m 3.2s'
        >>> get_duration_from_environ('BULKINSERT_TEST_VAL', None)
        63.2
        >>> os.environ['BULKINSERT_TEST_VAL'] = 'Invalid'
        >>> get_duration_from_environ('BULKINSERT_TEST_VAL', 42)
        42
    """

    def convert(val):
        # The stock time-interval only takes integers.
        if any(c in val for c in ' wdhms'):
            delta = stock_datatypes['timedelta'](val)
            return delta.total_seconds()
        return float(val)

    return _setting_from_environ(convert, environ_name, default, logger)


def _get_log_time_level(level_int, default):
    level_name = logging.getLevelName(level_int)
    val = get_duration_from_environ('BULKINSERT_PERF_LOG_%s_MIN' % level_name, default,
                                    logger=perf_logger)
    return (level_int, float(val))

# (level_int, min_duration), ordered by increasing min_duration.
# Modify in place to apply to every function, or assign a copy to
# ``func.__wrapped__.log_levels`` for just one.
_LOG_TIMED_DEFAULT_DURATIONS = [
    _get_log_time_level(TRACE, 0.31),
    _get_log_time_level(DEBUG, 1.24),
    _get_log_time_level(INFO, 3.03),
    _get_log_time_level(WARN, 9.24),
    _get_log_time_level(ERROR, 20.10)
]

_LOG_TIMED_DEFAULT_DURATIONS.sort(key=lambda x: x[1])

# If this is false when a module is imported, timing decorations
# are omitted.
_LOG_TIMED_COMPILETIME_ENABLE = get_boolean_from_environ(
    'BULKINSERT_PERF_LOG_ENABLE',
    'on',
    logger=perf_logger,
)

def do_log_duration_info(basic_msg, func, actual_duration, log=perf_logger):
    if func is None:
        # Timing was disabled at compile time
        return

    log_level = 0
    for level, duration in func.log_levels:
        if actual_duration < duration:
            break
        log_level = level

    if not log_level or not log.isEnabledFor(log_level):
        return

    log.log(log_level, basic_msg, func.__name__, actual_duration)


def log_timed(func):
    """
    Log how long *func* takes, at a level chosen by the duration.

    Short calls are not logged at all.
    """
    func.log_levels = _LOG_TIMED_DEFAULT_DURATIONS
    if not _LOG_TIMED_COMPILETIME_ENABLE:
        if getattr(func, '__wrapped__', func) is func:
            func.__wrapped__ = None
        return func

    counter = perf_counter
    log = do_log_duration_info
    func_logger = logging.getLogger(func.__module__).getChild('timing')

    @wraps(func)
    def f(*args, **kwargs):
        begin = counter()
        try:
            return func(*args, **kwargs)
        finally:
            log("Function %s took %.3fs.", func, counter() - begin,
                log=func_logger)

    return f


if IN_TESTRUNNER and os.environ.get('BULKINSERT_TEST_DISABLE_METRICS'):
    # Under the testrunner the metric wrappers only make
    # backtraces ugly.
    metricmethod = lambda f: f
