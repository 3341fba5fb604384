"""Parlor: password-protected rooms with threaded messages."""
