"""
Ledger mirror: a local, queryable cache of an append-only metadata ledger.

Ledger entries point at content-addressed metadata records. The sync engine
pages through the ledger, fetches and decodes each record, and stores it in a
SQLite cache that supports substring search and browsing by ingestion time.
"""
