from __future__ import annotations


class VatDeckError(Exception):
    """Base class for errors raised while parsing a deck."""


class ArchiveError(VatDeckError):
    """The deck is not a readable slide package: corrupt, empty, or unsafe."""
