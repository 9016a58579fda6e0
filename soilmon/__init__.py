"""Soil moisture monitor: serial sensor ingestion with real-time push."""
