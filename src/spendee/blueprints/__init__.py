"""HTTP blueprints, one package per resource."""
