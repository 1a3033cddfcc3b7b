"""Day planning: clustering, selection, anchors, ordering and costing."""
