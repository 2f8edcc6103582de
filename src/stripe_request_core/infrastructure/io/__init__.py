"""IO adapters: HTTP transports and filesystem access."""
