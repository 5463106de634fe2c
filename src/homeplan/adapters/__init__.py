"""Storage adapters implementing the repository interfaces."""
