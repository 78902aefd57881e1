#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/__init__.py
"""Utility modules for doxx.

This package contains helpers for package validation, OMML rendering, image
extraction, text measurement and dependency checks.
"""
