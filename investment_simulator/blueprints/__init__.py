"""HTTP blueprints for the investment simulator."""
