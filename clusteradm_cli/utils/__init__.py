"""Utility modules for clusteradm."""
