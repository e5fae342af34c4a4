"""Document-database adapter: entities as JSON documents in SQL collections."""
