"""Source-code hosts that feed syntax-tree nodes to the extraction engine."""
