"""Derived views: display shapes built from filtered Airtable records.

Clients read only these views, never raw record payloads.
Missing fields are replaced by placeholders, never raised on.
"""
