"""FastAPI adapter: route table snapshot and dependency markers."""
