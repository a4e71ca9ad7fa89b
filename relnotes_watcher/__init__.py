"""
Release Notes Watcher - Poll a release-notes feed and notify on new releases.

A Python application that watches an Atom release-notes feed, sends a
notification when a release newer than the last one seen appears, and
renders the entries as a date-grouped list with a sticky header.
"""

__version__ = "1.0.0"
