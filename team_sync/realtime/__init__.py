"""Realtime infrastructure (Socket.IO broadcast relay)."""
