"""Snapshot capture: walk a real directory into a tree, filtered by ignore rules."""
