"""Invoice pipeline and access-control services used by the blueprints."""
