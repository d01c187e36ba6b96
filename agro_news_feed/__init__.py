"""Agro News Feed: agricultural machinery news aggregator."""
