"""Destination store layer.

This module writes books, authors, and links into PostgreSQL.
It owns connections, parameterized statements, and chunk transactions.
"""
