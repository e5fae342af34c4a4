"""Casebook: workspace-scoped case/action/knowledge repository layer."""
