"""helm-drift: line-level drift reports between Helm releases and live cluster state."""
