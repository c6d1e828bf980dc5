"""Clusteradm - cluster API management cluster tooling."""
