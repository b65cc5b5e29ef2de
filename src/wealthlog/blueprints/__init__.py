"""HTTP blueprints; registered by ``create_app`` under the API prefix."""
