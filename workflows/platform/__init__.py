"""OS-level helpers: processes and archives."""
