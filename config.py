#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Application configuration.

Values are read from the environment (optionally populated from a .env file)
once at import time. Tests build their own Config subclass instead of touching
the environment.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value in (None, ''):
        return default
    return int(value)


class Config:
    """Runtime settings for the scheduling backend."""

    DATABASE_URL = os.environ.get('DATABASE_URL')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Recurrence expansion
    MAX_OCCURRENCES_PER_RULE = _int_env('MAX_OCCURRENCES_PER_RULE', 1000)

    # Proposals and voting
    PROPOSAL_VOTING_DAYS = _int_env('PROPOSAL_VOTING_DAYS', 7)
    DAYTIME_START_OFFSET_HOURS = _int_env('DAYTIME_START_OFFSET_HOURS', 9)
    DAYTIME_END_OFFSET_HOURS = _int_env('DAYTIME_END_OFFSET_HOURS', 2)

    # Python weekday numbering: Monday=0 ... Sunday=6
    WEEK_STARTS_ON = _int_env('WEEK_STARTS_ON', 6)

    # Stale schedule cleanup
    CLEANUP_ENABLED = os.environ.get('CLEANUP_ENABLED', '1') == '1'
    CLEANUP_RETENTION_MONTHS = _int_env('CLEANUP_RETENTION_MONTHS', 6)

    JSON_SORT_KEYS = False


class TestingConfig(Config):
    """In-memory SQLite configuration used by the test suite."""

    TESTING = True
    DATABASE_URL = 'sqlite://'
    CLEANUP_ENABLED = False
    LOG_LEVEL = 'DEBUG'
