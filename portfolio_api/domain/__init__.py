"""Domain rules (record schemas, validation) independent of storage and HTTP."""
