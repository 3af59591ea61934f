"""
Backup and restore for the Estommy back office.

Snapshots every tracked business record into a portable JSON document, stores
it on the local filesystem or an S3-compatible bucket, prunes old automatic
backups and restores a snapshot atomically.
"""
